#!/usr/bin/env python3
"""
xmldrive: mount an XML document as a directory tree.

Usage:
    xmldrive convert books.xml food
    xmldrive mount /mnt/books food
    xmldrive unmount /mnt/books
"""

import argparse
import sys
from typing import Optional

from . import cli


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="xmldrive",
        description="Project an XML document onto a FUSE filesystem",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    mount = sub.add_parser("mount", help="Mount a backing directory (runs in the foreground)")
    mount.add_argument("mountpoint", help="Directory to mount the filesystem")
    mount.add_argument(
        "backing_dir",
        nargs="?",
        default=None,
        help="Backing directory produced by 'xmldrive convert' (default: food)",
    )
    mount.add_argument(
        "--allow-non-empty",
        action="store_true",
        help="Mount over a directory that already has contents",
    )
    mount.set_defaults(func=cli.cmd_mount)

    unmount = sub.add_parser("unmount", help="Unmount a running mount")
    unmount.add_argument("mountpoint")
    unmount.set_defaults(func=cli.cmd_unmount)

    convert = sub.add_parser("convert", help="Convert an XML file into a backing directory")
    convert.add_argument("source", help="XML file to convert")
    convert.add_argument("target", help="Backing directory to create")
    convert.set_defaults(func=cli.cmd_convert)

    config = sub.add_parser("config", help="Show configuration")
    config.set_defaults(func=cli.cmd_config)

    return parser


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    cli.setup_logging(args.debug)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
