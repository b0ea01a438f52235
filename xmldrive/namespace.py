"""
Namespace Adapter: the path-level operations served to the kernel bridge.

Each operation resolves its path against the live tree, then renders or
writes, all while holding a single lock that covers the whole Document.
"""

import logging
import stat
import threading
from dataclasses import dataclass

from .config import WriteConfig
from .errors import InvalidOperationError, NotFoundError
from .models import ATTR_FILE, TEXT_FILE, Document
from .render import render_attributes, render_text
from .resolver import Kind, Resolution, entry_name, resolve
from .sync import WriteSynchronizer

log = logging.getLogger(__name__)

DIR_MODE = stat.S_IFDIR | 0o755
FILE_MODE_READONLY = stat.S_IFREG | 0o444
FILE_MODE_WRITABLE = stat.S_IFREG | 0o644


@dataclass(frozen=True)
class EntryStat:
    """Metadata for one virtual entry."""
    is_dir: bool
    mode: int
    size: int = 0


class Namespace:
    """Thread-safe view of a Document as a directory tree."""

    def __init__(self, document: Document, backing_root: str, write_config: WriteConfig = None):
        self.document = document
        self.backing_root = backing_root
        self.write_config = write_config or WriteConfig()
        self._sync = WriteSynchronizer(document, backing_root, self.write_config)
        self._lock = threading.Lock()

    def _resolve(self, path: str) -> Resolution:
        resolution = resolve(self.document, path)
        if resolution.kind is Kind.NOT_FOUND:
            raise NotFoundError(path)
        return resolution

    def _render(self, resolution: Resolution) -> bytes:
        node = self.document.node(resolution.handle)
        if resolution.kind is Kind.ATTR_FILE:
            return render_attributes(node)
        return render_text(node)

    def stat(self, path: str) -> EntryStat:
        with self._lock:
            resolution = self._resolve(path)
            if resolution.is_dir:
                return EntryStat(is_dir=True, mode=DIR_MODE)
            mode = FILE_MODE_WRITABLE if self.write_config.report_writable else FILE_MODE_READONLY
            return EntryStat(is_dir=False, mode=mode, size=len(self._render(resolution)))

    def list(self, path: str) -> list[str]:
        """Entry names of a directory, starting with '.' and '..'."""
        with self._lock:
            resolution = self._resolve(path)
            if not resolution.is_dir:
                raise InvalidOperationError("list", path)

            names = [".", ".."]
            if resolution.kind is Kind.ROOT:
                root = self.document.root_node
                if root is not None:
                    names.append(entry_name(0, root.tag))
                return names

            node = self.document.node(resolution.handle)
            if node.attributes:
                names.append(ATTR_FILE)
            if node.has_text:
                names.append(TEXT_FILE)
            for index, (_, child) in enumerate(self.document.children(resolution.handle)):
                names.append(entry_name(index, child.tag))
            return names

    def open(self, path: str) -> Resolution:
        with self._lock:
            resolution = self._resolve(path)
            if not resolution.is_file:
                raise InvalidOperationError("open", path)
            return resolution

    def read(self, path: str, offset: int, size: int) -> bytes:
        with self._lock:
            resolution = self._resolve(path)
            if not resolution.is_file:
                raise InvalidOperationError("read", path)
            content = self._render(resolution)
            if offset >= len(content):
                return b""
            return content[offset:offset + size]

    def write(self, path: str, offset: int, data: bytes) -> int:
        with self._lock:
            return self._sync.write(self._resolve(path), path, offset, data)

    def truncate(self, path: str, length: int = 0) -> None:
        with self._lock:
            self._sync.truncate(self._resolve(path), path)
