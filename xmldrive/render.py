"""Content Renderer: bytes served for an element's pseudo-files.

Rendered fresh on every call; the same functions feed both st_size and
read() so the two can never disagree.
"""

from .models import Node, encode


def render_attributes(node: Node) -> bytes:
    """attr.txt content: one `key=value\\r\\n` line per attribute, in order."""
    return encode("".join(f"{key}={value}\r\n" for key, value in node.attributes.items()))


def render_text(node: Node) -> bytes:
    """inner.txt content: the element's text, or nothing when absent."""
    if node.text is None:
        return b""
    return encode(node.text)
