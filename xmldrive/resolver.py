"""
Path Resolver: maps a virtual path to a position in the Document.

Virtual layout:
    /                          - Mount root, lists only 0_<rootTag>
    /0_<rootTag>/              - Document element
    /0_<rootTag>/attr.txt      - Attribute pseudo-file
    /0_<rootTag>/inner.txt     - Text pseudo-file
    /0_<rootTag>/<i>_<tag>/    - Child at position i, which must have tag <tag>

Resolution is positional and strict: a segment names exactly one child by
(position, tag) and never falls back to another sibling with the same tag.
"""

import enum
from dataclasses import dataclass
from typing import Optional

from .loader import parse_child_name
from .models import ATTR_FILE, TEXT_FILE, Document


class Kind(enum.Enum):
    ROOT = "root"
    DIRECTORY = "directory"
    ATTR_FILE = "attr_file"
    TEXT_FILE = "text_file"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class Resolution:
    kind: Kind
    handle: Optional[int] = None

    @property
    def is_dir(self) -> bool:
        return self.kind in (Kind.ROOT, Kind.DIRECTORY)

    @property
    def is_file(self) -> bool:
        return self.kind in (Kind.ATTR_FILE, Kind.TEXT_FILE)


NOT_FOUND = Resolution(Kind.NOT_FOUND)

_FILE_KINDS = {ATTR_FILE: Kind.ATTR_FILE, TEXT_FILE: Kind.TEXT_FILE}


def entry_name(index: int, tag: str) -> str:
    """Directory name for the element at `index` among its siblings."""
    return f"{index}_{tag}"


def split_path(path: str) -> list[str]:
    """Split on '/' and drop empty segments."""
    return [part for part in path.split("/") if part]


def resolve(document: Document, path: str) -> Resolution:
    """Resolve `path` against the current state of `document`."""
    parts = split_path(path)
    if not parts:
        return Resolution(Kind.ROOT)

    root = document.root_node
    if root is None or parts[0] != entry_name(0, root.tag):
        return NOT_FOUND

    current = document.root
    last = len(parts) - 1
    for i, part in enumerate(parts[1:], start=1):
        if part in _FILE_KINDS:
            if i != last:
                return NOT_FOUND
            return Resolution(_FILE_KINDS[part], current)

        parsed = parse_child_name(part)
        if parsed is None:
            return NOT_FOUND
        index, tag = parsed
        # Only the canonical spelling is accepted (no "01_x" alias for "1_x")
        if part != entry_name(index, tag):
            return NOT_FOUND

        found = None
        position = 0
        for child, node in document.children(current):
            if position == index:
                if node.tag == tag:
                    found = child
                break
            position += 1

        if found is None:
            return NOT_FOUND
        current = found

    return Resolution(Kind.DIRECTORY, current)
