"""
InodeMixin: inode table management and attribute resolution.

Inodes are handed out lazily, one per virtual path, the first time the
kernel looks a path up.
"""

import logging

import pyfuse3

from ..models import ATTR_FILE, TEXT_FILE, InodeEntry
from .base import fuse_errors

log = logging.getLogger(__name__)


def _child_path(parent_path: str, name: str) -> str:
    if parent_path == "/":
        return f"/{name}"
    return f"{parent_path}/{name}"


def _entry_type(name: str) -> str:
    if name == ATTR_FILE:
        return "attr_file"
    if name == TEXT_FILE:
        return "text_file"
    return "element"


class InodeMixin:
    """Inode table management and attribute resolution."""

    async def getattr(self, inode: int, ctx: pyfuse3.RequestContext) -> pyfuse3.EntryAttributes:
        """Get file/directory attributes."""
        entry = self._entry(inode)
        with fuse_errors():
            st = self.namespace.stat(entry.path)
        return self._make_attr(inode, st)

    def _get_or_create_inode(self, name: str, parent_inode: int) -> int:
        """Get or create the inode for `name` inside `parent_inode`."""
        parent = self._entry(parent_inode)
        path = _child_path(parent.path, name)

        inode = self._path_inodes.get(path)
        if inode is not None:
            return inode

        inode = self._next_inode
        self._next_inode += 1
        self._inodes[inode] = InodeEntry(
            entry_type=_entry_type(name),
            path=path,
        )
        self._path_inodes[path] = inode
        log.debug(f"Allocated inode {inode} for {path}")
        return inode
