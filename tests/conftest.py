"""
Pytest fixtures for xmldrive tests.

Provides:
- make_tree: write a nested dict out as a backing directory
- catalog_dir: a small backing directory with repeated tags and gaps in numbering
- catalog: a Namespace over catalog_dir
"""

from pathlib import Path

import pytest

from xmldrive.loader import load_document
from xmldrive.namespace import Namespace


def write_tree(base: Path, layout: dict) -> Path:
    """Create `layout` under `base`. Dict values are directories, bytes/str are files."""
    base.mkdir(parents=True, exist_ok=True)
    for name, value in layout.items():
        path = base / name
        if isinstance(value, dict):
            write_tree(path, value)
        elif isinstance(value, bytes):
            path.write_bytes(value)
        else:
            path.write_bytes(value.encode("utf-8"))
    return base


CATALOG_LAYOUT = {
    "0_catalog": {
        "attr.txt": "lang=en\r\nversion=2\r\n",
        "2_book": {
            "attr.txt": "id=b2\r\n",
            "inner.txt": "Second",
        },
        "0_book": {
            "attr.txt": "id=b1\r\n",
            "inner.txt": "First",
        },
        "5_note": {},
        "10_book": {
            "0_title": {"inner.txt": "Third"},
        },
    },
}


@pytest.fixture
def anyio_backend():
    return "trio"


@pytest.fixture
def make_tree(tmp_path):
    def _make(layout: dict, name: str = "food") -> Path:
        return write_tree(tmp_path / name, layout)
    return _make


@pytest.fixture
def catalog_dir(make_tree) -> Path:
    return make_tree(CATALOG_LAYOUT)


@pytest.fixture
def catalog(catalog_dir) -> Namespace:
    return Namespace(load_document(str(catalog_dir)), str(catalog_dir))
