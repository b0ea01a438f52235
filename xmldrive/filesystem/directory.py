"""
DirectoryMixin: directory listing and lookup.

Handles lookup, opendir/releasedir and readdir over the element tree.
"""

import errno
import logging
import os

import pyfuse3

from ..models import is_dir_type
from .base import fuse_errors
from .inode import _child_path

log = logging.getLogger(__name__)


class DirectoryMixin:
    """Directory listing and lookup."""

    async def lookup(self, parent_inode: int, name: bytes, ctx: pyfuse3.RequestContext) -> pyfuse3.EntryAttributes:
        """Look up a directory entry by name."""
        name_str = os.fsdecode(name)
        log.debug(f"lookup: parent={parent_inode}, name={name_str}")

        parent = self._entry(parent_inode)
        if not is_dir_type(parent.entry_type):
            raise pyfuse3.FUSEError(errno.ENOTDIR)

        path = _child_path(parent.path, name_str)
        with fuse_errors():
            st = self.namespace.stat(path)

        inode = self._get_or_create_inode(name_str, parent_inode)
        return self._make_attr(inode, st)

    async def opendir(self, inode: int, ctx: pyfuse3.RequestContext) -> int:
        """Open a directory, return file handle."""
        if not is_dir_type(self._entry(inode).entry_type):
            raise pyfuse3.FUSEError(errno.ENOTDIR)
        return inode  # Use inode as file handle

    async def releasedir(self, fh: int) -> None:
        """Release (close) a directory handle. No-op, inodes are the handles."""
        pass

    async def readdir(self, fh: int, start_id: int, token: pyfuse3.ReaddirToken) -> None:
        """Read directory contents.

        start_id is the position in the listing to resume from; the kernel
        supplies '.' and '..' itself.
        """
        log.debug(f"readdir: fh={fh}, start_id={start_id}")
        entry = self._entry(fh)

        with fuse_errors():
            names = [n for n in self.namespace.list(entry.path) if n not in (".", "..")]

        for position in range(start_id, len(names)):
            name = names[position]
            inode = self._get_or_create_inode(name, fh)
            with fuse_errors():
                st = self.namespace.stat(self._inodes[inode].path)
            if not pyfuse3.readdir_reply(token, os.fsencode(name), self._make_attr(inode, st), position + 1):
                break
