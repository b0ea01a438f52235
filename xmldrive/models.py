"""Data models: the element tree held in memory and the FUSE inode table entries."""

from dataclasses import dataclass, field
from typing import Iterator, Optional

# Side-channel file names inside every element directory
ATTR_FILE = "attr.txt"
TEXT_FILE = "inner.txt"

# Text and attribute bytes are carried as str; surrogateescape keeps
# arbitrary bytes lossless across decode/encode.
ENCODING = "utf-8"
ENCODING_ERRORS = "surrogateescape"


def decode(data: bytes) -> str:
    return data.decode(ENCODING, ENCODING_ERRORS)


def encode(text: str) -> bytes:
    return text.encode(ENCODING, ENCODING_ERRORS)


@dataclass
class Node:
    """One element of the document.

    Children and parent are handles into the owning Document's arena.
    `source` is the backing directory name the node was loaded from; it is
    only used to find the node's files on disk when writing through.
    """
    tag: str
    source: str = ""
    parent: Optional[int] = None
    attributes: dict[str, str] = field(default_factory=dict)
    text: Optional[str] = None
    children: list[int] = field(default_factory=list)

    def set_attributes(self, replacement: dict[str, str]) -> None:
        """Replace the whole attribute set, keeping the replacement's order."""
        self.attributes = dict(replacement)

    def set_text(self, value: str) -> None:
        self.text = value

    @property
    def has_text(self) -> bool:
        return self.text is not None


class Document:
    """Arena of Nodes with one designated root.

    Nodes are addressed by integer handles that stay valid for the life of
    the document; nothing is ever removed from the arena.
    """

    def __init__(self):
        self._nodes: list[Node] = []
        self.root: Optional[int] = None
        # Extra top-level elements found at load time; loaded but not exposed
        self.unreachable_roots: list[int] = []

    def __len__(self) -> int:
        return len(self._nodes)

    def add_node(self, tag: str, source: str = "", parent: Optional[int] = None) -> int:
        """Create a node, append it to `parent`'s children, and return its handle."""
        handle = len(self._nodes)
        self._nodes.append(Node(tag=tag, source=source, parent=parent))
        if parent is not None:
            self._nodes[parent].children.append(handle)
        return handle

    def node(self, handle: int) -> Node:
        return self._nodes[handle]

    def children(self, handle: int) -> Iterator[tuple[int, Node]]:
        """Yield (handle, node) for each child of `handle`, in order."""
        for child in self._nodes[handle].children:
            yield child, self._nodes[child]

    @property
    def root_node(self) -> Optional[Node]:
        if self.root is None:
            return None
        return self._nodes[self.root]

    def backing_path(self, handle: int) -> list[str]:
        """Backing directory names from the top level down to `handle`."""
        parts = []
        current: Optional[int] = handle
        while current is not None:
            node = self._nodes[current]
            parts.append(node.source)
            current = node.parent
        parts.reverse()
        return parts


@dataclass
class InodeEntry:
    """Metadata for an inode handed out to the kernel.

    Entry types mirror the resolved kinds of a virtual path:
    - root: Mount root (lists the single document element)
    - element: Directory for one element
    - attr_file: The attr.txt pseudo-file of an element
    - text_file: The inner.txt pseudo-file of an element
    """
    entry_type: str
    path: str  # Virtual path, always absolute


# Directory entry types
DIR_TYPES = frozenset({"root", "element"})


def is_dir_type(entry_type: str) -> bool:
    """Check if entry type is a directory."""
    return entry_type in DIR_TYPES
