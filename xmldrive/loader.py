"""
Directory Loader: builds the in-memory Document from a backing directory.

Backing layout (as produced by `xmldrive convert`):

    <backing>/0_<rootTag>/
        attr.txt          key=value lines, CRLF terminated (optional)
        inner.txt         raw element text (optional)
        <n>_<childTag>/   one directory per child element

Loading is permissive: unparseable names, unparseable attribute lines and
unreadable directories are skipped rather than aborting the load.
"""

import logging
import os
from typing import Optional

from .models import ATTR_FILE, TEXT_FILE, Document, decode

log = logging.getLogger(__name__)


def parse_child_name(name: str) -> Optional[tuple[int, str]]:
    """Split `<integer>_<tag>` into (integer, tag). None if it doesn't parse."""
    index_part, sep, tag = name.partition("_")
    if not sep:
        return None
    try:
        index = int(index_part)
    except ValueError:
        return None
    return index, tag


def parse_attributes(data: bytes) -> dict[str, str]:
    """Parse attr.txt content into an ordered attribute mapping.

    One `key=value` per line; a trailing carriage return is trimmed from the
    value. Lines without `=` are skipped. A repeated key keeps the position
    of its first occurrence and the value of its last.
    """
    attributes: dict[str, str] = {}
    for line in decode(data).split("\n"):
        if not line:
            continue
        key, sep, value = line.partition("=")
        if not sep:
            continue
        if value.endswith("\r"):
            value = value[:-1]
        attributes[key] = value
    return attributes


def _read_bytes(path: str) -> bytes:
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as e:
        log.debug(f"Could not read {path}: {e}")
        return b""


def _scan(path: str, document: Document, handle: Optional[int]) -> list[tuple[int, str, str]]:
    """Read one backing directory.

    Fills in the side-channel files of `handle` (if any) and returns the
    child entries as (index, tag, entry name), in load order.
    """
    try:
        with os.scandir(path) as it:
            names = [entry.name for entry in it]
    except OSError as e:
        log.debug(f"Skipping unreadable directory {path}: {e}")
        return []

    children = []
    for name in names:
        full_path = os.path.join(path, name)

        if name == ATTR_FILE:
            if handle is None:
                log.debug(f"Ignoring {full_path} above the document element")
                continue
            document.node(handle).set_attributes(parse_attributes(_read_bytes(full_path)))

        elif name == TEXT_FILE:
            if handle is None:
                log.debug(f"Ignoring {full_path} above the document element")
                continue
            document.node(handle).set_text(decode(_read_bytes(full_path)))

        else:
            parsed = parse_child_name(name)
            if parsed is None:
                log.debug(f"Skipping unrecognised entry {full_path}")
                continue
            index, tag = parsed
            children.append((index, tag, name))

    # Index first, then the entry name so duplicate indices order the same way every time
    children.sort(key=lambda c: (c[0], c[2]))
    return children


def _load_into(path: str, document: Document, handle: int) -> None:
    for _, tag, name in _scan(path, document, handle):
        child = document.add_node(tag, source=name, parent=handle)
        _load_into(os.path.join(path, name), document, child)


def load_document(backing_dir: str) -> Document:
    """Build a Document from `backing_dir`.

    The first top-level element (in index order) becomes the document root.
    Any further top-level elements are loaded but stay unreachable.
    """
    document = Document()

    if not os.path.isdir(backing_dir):
        log.warning(f"Backing directory {backing_dir} does not exist, serving an empty tree")
        return document

    for _, tag, name in _scan(backing_dir, document, None):
        handle = document.add_node(tag, source=name)
        _load_into(os.path.join(backing_dir, name), document, handle)
        if document.root is None:
            document.root = handle
        else:
            document.unreachable_roots.append(handle)
            log.warning(f"Ignoring extra top-level element {name} in {backing_dir}")

    if document.root is None:
        log.warning(f"No document element found in {backing_dir}")
    else:
        log.info(f"Loaded <{document.root_node.tag}> from {backing_dir} ({len(document)} elements)")

    return document
