"""
Write Synchronizer: applies pseudo-file writes to the tree and to disk.

Every write is a whole-value replacement starting at offset 0. The new
value is installed in memory first and then written through to the
element's file in the backing directory. If the write-through fails the
in-memory change is undone, so memory and disk never disagree.
"""

import logging
import os

from .config import WriteConfig
from .errors import DurabilityError, InvalidOperationError
from .loader import parse_attributes
from .models import ATTR_FILE, TEXT_FILE, Document, decode
from .resolver import Kind, Resolution

log = logging.getLogger(__name__)


class WriteSynchronizer:
    """Applies attr.txt / inner.txt writes with synchronous write-through."""

    def __init__(self, document: Document, backing_root: str, config: WriteConfig = None):
        self.document = document
        self.backing_root = backing_root
        self.config = config or WriteConfig()

    def backing_file(self, resolution: Resolution) -> str:
        """Backing file that mirrors the pseudo-file `resolution` points at."""
        name = ATTR_FILE if resolution.kind is Kind.ATTR_FILE else TEXT_FILE
        return os.path.join(self.backing_root, *self.document.backing_path(resolution.handle), name)

    def write(self, resolution: Resolution, path: str, offset: int, data: bytes) -> int:
        """Replace the pseudo-file's value with `data`. Returns bytes accepted."""
        if not resolution.is_file:
            raise InvalidOperationError("write", path)

        if offset != 0:
            if self.config.reject_offset_writes:
                raise InvalidOperationError("write at non-zero offset", path)
            log.debug(f"Ignoring {len(data)} byte write at offset {offset} to {path}")
            return len(data)

        node = self.document.node(resolution.handle)
        if resolution.kind is Kind.ATTR_FILE:
            previous = dict(node.attributes)
            node.set_attributes(parse_attributes(data))

            def rollback():
                node.set_attributes(previous)
        else:
            previous_text = node.text
            node.set_text(decode(data))

            def rollback():
                node.text = previous_text

        backing_file = self.backing_file(resolution)
        try:
            with open(backing_file, "wb") as f:
                f.write(data)
        except OSError as e:
            rollback()
            log.error(f"Write-through to {backing_file} failed, change to {path} rolled back: {e}")
            raise DurabilityError(backing_file, e) from e

        log.info(f"Wrote {len(data)} bytes to {path}")
        return len(data)

    def truncate(self, resolution: Resolution, path: str) -> None:
        """Truncation of a pseudo-file is accepted and changes nothing.

        The value is replaced by the write that follows.
        """
        if not resolution.is_file:
            raise InvalidOperationError("truncate", path)
