"""
xmldrive FUSE Filesystem: mixin composition.

Hierarchy:
- /                                  - Mount root (the document element only)
- /0_{rootTag}/                      - Document element
- /0_{rootTag}/attr.txt              - Attributes, one key=value per CRLF line
- /0_{rootTag}/inner.txt             - Element text
- /0_{rootTag}/{i}_{tag}/            - Child element at position i

attr.txt is listed only when the element has attributes, inner.txt only
when it has text. Both can always be opened and written.
"""

from .base import BaseMixin, fuse_errors
from .directory import DirectoryMixin
from .inode import InodeMixin
from .read import ReadMixin
from .write import WriteMixin


class XmlDriveFS(
    WriteMixin,        # write, setattr, release
    ReadMixin,         # open, read
    DirectoryMixin,    # lookup, opendir, readdir, releasedir
    InodeMixin,        # getattr, inode allocation
    BaseMixin,         # __init__, destroy, statfs, access, flush (MUST be last)
):
    """xmldrive FUSE Filesystem.

    Composed from mixins. BaseMixin must be last in MRO so its __init__
    runs first and sets up all shared state.
    """
    pass


__all__ = [
    "XmlDriveFS",
    "fuse_errors",
]
