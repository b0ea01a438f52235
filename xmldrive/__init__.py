"""xmldrive: an XML element tree served as a FUSE filesystem."""

from .loader import load_document
from .models import Document, Node
from .namespace import Namespace

__all__ = ["Document", "Node", "Namespace", "load_document"]
