"""
Offline converter: writes an XML document out as a backing directory.

Each element becomes `<position>_<tag>/` under its parent's directory
(the document element is always `0_<tag>`), with its attributes in
`attr.txt` and its text in `inner.txt`. The result is what
`load_document` reads back at mount time.
"""

import logging
import os
import xml.etree.ElementTree as ET

from .errors import ConversionError
from .models import ATTR_FILE, TEXT_FILE, encode
from .resolver import entry_name

log = logging.getLogger(__name__)


def _strip_ns(tag: str) -> str:
    """Remove namespace from a tag like {http://...}name → name."""
    if "}" in tag:
        return tag.split("}", 1)[1]
    return tag


def _write_file(path: str, data: bytes) -> None:
    with open(path, "wb") as f:
        f.write(data)


def write_element(element: ET.Element, parent_dir: str, index: int) -> int:
    """Write `element` and its descendants below `parent_dir`.

    Returns the number of element directories created.
    """
    current = os.path.join(parent_dir, entry_name(index, _strip_ns(element.tag)))
    os.makedirs(current, exist_ok=True)

    if element.attrib:
        lines = "".join(f"{key}={value}\r\n" for key, value in element.attrib.items())
        _write_file(os.path.join(current, ATTR_FILE), encode(lines))

    # Indentation between child elements is not text
    if element.text is not None and element.text.strip():
        _write_file(os.path.join(current, TEXT_FILE), encode(element.text))

    count = 1
    for position, child in enumerate(element):
        count += write_element(child, current, position)
    return count


def convert(source: str, target_dir: str) -> int:
    """Convert the XML file `source` into a backing directory at `target_dir`.

    Returns the number of elements written. Raises ConversionError if the
    source can't be read or parsed.
    """
    try:
        tree = ET.parse(source)
    except (ET.ParseError, OSError) as e:
        raise ConversionError(f"Failed to load XML file {source}: {e}") from e

    os.makedirs(target_dir, exist_ok=True)
    count = write_element(tree.getroot(), target_dir, 0)
    log.info(f"Converted {source} to {target_dir} ({count} elements)")
    return count
