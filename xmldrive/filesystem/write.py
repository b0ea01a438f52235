"""
WriteMixin: pseudo-file writes and truncation.

A write at offset 0 replaces the whole attribute set (attr.txt) or the
whole text (inner.txt) and is persisted to the backing directory before
the reply is sent.
"""

import logging

import pyfuse3

from .base import fuse_errors

log = logging.getLogger(__name__)


class WriteMixin:
    """Pseudo-file writes and truncation."""

    async def write(self, fh: int, off: int, buf: bytes) -> int:
        """Write to attr.txt or inner.txt."""
        entry = self._entry(fh)
        log.debug(f"write: {entry.path}, off={off}, len={len(buf)}")
        with fuse_errors():
            return self.namespace.write(entry.path, off, buf)

    async def setattr(self, inode: int, attr: pyfuse3.EntryAttributes, fields: pyfuse3.SetattrFields, fh: int, ctx: pyfuse3.RequestContext) -> pyfuse3.EntryAttributes:
        """Set file attributes (needed for truncate on write).

        Only size changes are meaningful; mode, owner and timestamps are
        derived and silently left alone.
        """
        entry = self._entry(inode)
        if fields.update_size:
            with fuse_errors():
                self.namespace.truncate(entry.path, attr.st_size)
        return await self.getattr(inode, ctx)

    async def release(self, fh: int) -> None:
        """Release (close) a file. No-op, nothing is buffered per handle."""
        pass
