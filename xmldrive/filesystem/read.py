"""
ReadMixin: file open and read operations.
"""

import logging

import pyfuse3

from .base import fuse_errors

log = logging.getLogger(__name__)


class ReadMixin:
    """File open and read operations."""

    async def open(self, inode: int, flags: int, ctx: pyfuse3.RequestContext) -> pyfuse3.FileInfo:
        """Open a pseudo-file."""
        entry = self._entry(inode)
        with fuse_errors():
            self.namespace.open(entry.path)

        fi = pyfuse3.FileInfo(fh=inode)
        # Content is rendered on every read and changes size after writes;
        # bypass the page cache so readers never see a stale length.
        fi.direct_io = True
        return fi

    async def read(self, fh: int, off: int, size: int) -> bytes:
        """Read a byte range of the freshly rendered content."""
        entry = self._entry(fh)
        with fuse_errors():
            return self.namespace.read(entry.path, off, size)
