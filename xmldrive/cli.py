"""
Subcommand implementations for the xmldrive CLI.

Commands: mount, unmount, convert, config.
"""

import json
import logging
import os
import sys
from argparse import Namespace

from .config import DriveConfig, config_to_dict, get_config_path, load_config
from .converter import convert
from .errors import ConversionError
from .safety import ensure_mountpoint, fusermount_unmount, validate_mountpoint

log = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1


# --- ANSI formatting helpers ---

def _supports_color() -> bool:
    """Check if terminal supports ANSI colors."""
    if os.environ.get("NO_COLOR"):
        return False
    if not hasattr(sys.stdout, "isatty") or not sys.stdout.isatty():
        return False
    return True

def _use_color() -> bool:
    return _supports_color()

def _bold(text: str) -> str:
    return f"\033[1m{text}\033[0m" if _use_color() else text

def _green(text: str) -> str:
    return f"\033[32m{text}\033[0m" if _use_color() else text

def _red(text: str) -> str:
    return f"\033[31m{text}\033[0m" if _use_color() else text

def _dim(text: str) -> str:
    return f"\033[2m{text}\033[0m" if _use_color() else text


def setup_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# --- Subcommands ---

def cmd_convert(args: Namespace) -> int:
    """Convert an XML document into a backing directory."""
    try:
        count = convert(args.source, args.target)
    except ConversionError as e:
        print(f"{_red('Error:')} {e}", file=sys.stderr)
        return EXIT_FAILURE
    except OSError as e:
        print(f"{_red('Error:')} Could not write {args.target}: {e}", file=sys.stderr)
        return EXIT_FAILURE

    print(f"Converted {args.source} to {args.target} ({count} element{'s' if count != 1 else ''})")
    return EXIT_OK


def cmd_mount(args: Namespace) -> int:
    """Mount a backing directory in the foreground until unmounted."""
    config = load_config(
        cli_backing_dir=getattr(args, "backing_dir", None),
        cli_debug=getattr(args, "debug", False),
    )
    if config.debug:
        logging.getLogger().setLevel(logging.DEBUG)
    mountpoint = os.path.realpath(args.mountpoint)

    error = validate_mountpoint(
        mountpoint,
        allow_non_empty=getattr(args, "allow_non_empty", False),
        fsname=config.fsname,
    )
    if error:
        print(f"Error: {error}", file=sys.stderr)
        return EXIT_FAILURE

    error = ensure_mountpoint(mountpoint)
    if error:
        print(f"Error: {error}", file=sys.stderr)
        return EXIT_FAILURE

    _run_mount(mountpoint, config)
    return EXIT_OK


def build_fuse_options(config: DriveConfig, defaults) -> set[str]:
    """Mount options for pyfuse3.init.

    default_permissions is dropped: pseudo-files report 0444 yet accept
    writes, so the kernel must leave permission checks to the filesystem.
    """
    fuse_options = set(defaults)
    fuse_options.discard("default_permissions")
    fuse_options.add(f"fsname={config.fsname}")
    if config.debug:
        fuse_options.add("debug")
    return fuse_options


def _run_mount(mountpoint: str, config: DriveConfig) -> None:
    """Blocking function that runs the FUSE mount."""
    # Late import to avoid pulling in pyfuse3 for non-mount commands
    import pyfuse3
    import trio
    from .filesystem import XmlDriveFS
    from .loader import load_document
    from .namespace import Namespace as DocumentNamespace

    if config.backing_dir == DriveConfig().backing_dir:
        log.info(f"Using default backing directory: {config.backing_dir}")

    backing_root = os.path.abspath(config.backing_dir)
    document = load_document(backing_root)
    fs = XmlDriveFS(DocumentNamespace(document, backing_root, config.write))

    fuse_options = build_fuse_options(config, pyfuse3.default_options)

    log.info(f"Mounting {backing_root} at {mountpoint}")
    pyfuse3.init(fs, mountpoint, fuse_options)

    try:
        trio.run(pyfuse3.main)
    except KeyboardInterrupt:
        log.info("Interrupted, unmounting...")
    finally:
        pyfuse3.close(unmount=True)
        log.info("Unmounted")


def cmd_unmount(args: Namespace) -> int:
    """Unmount an xmldrive mount."""
    mountpoint = os.path.realpath(args.mountpoint)
    ok, msg = fusermount_unmount(mountpoint)
    if ok:
        print(f"  {mountpoint} {_green('unmounted')}")
        return EXIT_OK
    print(f"  {mountpoint}: {msg}", file=sys.stderr)
    return EXIT_FAILURE


def cmd_config(args: Namespace) -> int:
    """Show the resolved configuration."""
    path = get_config_path()
    exists = _green("(exists)") if path.exists() else _dim("(not found, using defaults)")
    print(f"\n{_bold('config:')} {path} {exists}\n")
    print(json.dumps(config_to_dict(load_config()), indent=2))
    print()
    return EXIT_OK
