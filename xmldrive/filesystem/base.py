"""
BaseMixin: lifecycle and core FUSE plumbing.

Handles init, destroy, statfs, access checks, the shared attribute helper
and translation of engine errors into FUSE errno replies.
"""

import errno
import logging
import os
import time
from contextlib import contextmanager

import pyfuse3

from ..errors import DurabilityError, InvalidOperationError, NotFoundError
from ..models import InodeEntry
from ..namespace import EntryStat, Namespace

log = logging.getLogger(__name__)


@contextmanager
def fuse_errors():
    """Re-raise engine errors as the FUSEError the kernel expects."""
    try:
        yield
    except NotFoundError:
        raise pyfuse3.FUSEError(errno.ENOENT)
    except InvalidOperationError as e:
        log.debug(f"Rejected: {e}")
        raise pyfuse3.FUSEError(errno.EPERM)
    except DurabilityError as e:
        log.error(str(e))
        raise pyfuse3.FUSEError(errno.EIO)


class BaseMixin(pyfuse3.Operations):
    """Lifecycle and core FUSE plumbing."""

    ROOT_INODE = pyfuse3.ROOT_INODE  # 1

    def __init__(self, namespace: Namespace):
        super().__init__()
        self.namespace = namespace

        # Inode management. The tree never changes shape after load, so a
        # virtual path keeps its inode for the life of the mount.
        self._inodes: dict[int, InodeEntry] = {
            self.ROOT_INODE: InodeEntry(entry_type="root", path="/"),
        }
        self._path_inodes: dict[str, int] = {"/": self.ROOT_INODE}
        self._next_inode = self.ROOT_INODE + 1

    def _make_attr(self, inode: int, st: EntryStat) -> pyfuse3.EntryAttributes:
        """Create file attributes."""
        attr = pyfuse3.EntryAttributes()
        attr.st_ino = inode
        attr.st_mode = st.mode
        attr.st_nlink = 2 if st.is_dir else 1
        attr.st_size = st.size
        attr.st_atime_ns = int(time.time() * 1e9)
        attr.st_mtime_ns = int(time.time() * 1e9)
        attr.st_ctime_ns = int(time.time() * 1e9)
        attr.st_uid = os.getuid()
        attr.st_gid = os.getgid()
        return attr

    def _entry(self, inode: int) -> InodeEntry:
        entry = self._inodes.get(inode)
        if entry is None:
            raise pyfuse3.FUSEError(errno.ENOENT)
        return entry

    async def statfs(self, ctx: pyfuse3.RequestContext) -> pyfuse3.StatvfsData:
        """Return filesystem stats. Required for file managers like Dolphin."""
        s = pyfuse3.StatvfsData()
        s.f_bsize = 4096
        s.f_frsize = 4096
        s.f_blocks = 0
        s.f_bfree = 0
        s.f_bavail = 0
        s.f_files = len(self.namespace.document)
        s.f_ffree = 0
        s.f_favail = 0
        s.f_namemax = 255
        return s

    async def access(self, inode: int, mode: int, ctx: pyfuse3.RequestContext) -> bool:
        """Permission check: always allow, each handler enforces its own rules.

        Pseudo-files advertise 0444 by default but still accept writes. The
        mount omits default_permissions, so the kernel asks here instead of
        checking mode bits itself.
        """
        return True

    async def flush(self, fh: int) -> None:
        """Flush file data. No-op, writes are persisted as they arrive."""
        pass

    async def destroy(self) -> None:
        """Nothing to flush on unmount: every write was persisted synchronously."""
        log.info("Destroying filesystem")
