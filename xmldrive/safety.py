"""
Safety fences for xmldrive.

Mountpoint validation, FUSE mount discovery and clean unmounting.
"""

import logging
import os
import subprocess
from pathlib import Path
from typing import Optional

log = logging.getLogger(__name__)

# System paths that must never be used as mountpoints
BLOCKED_PATHS = frozenset({
    "/", "/home", "/etc", "/usr", "/var", "/tmp", "/boot",
    "/bin", "/sbin", "/lib", "/lib64", "/dev", "/proc", "/sys",
    "/root", "/opt", "/srv", "/run", "/mnt",
})

FSNAME = "xmldrive"


# --- Mountpoint validation ---

def validate_mountpoint(path: str, allow_non_empty: bool = False, fsname: str = FSNAME) -> Optional[str]:
    """Validate a mountpoint path. Returns error message or None if OK."""
    resolved = os.path.realpath(path)

    # Block system paths
    if resolved in BLOCKED_PATHS:
        return (
            f"Refusing to mount at {resolved}: this is a system directory.\n"
            f"\n"
            f"Use a dedicated empty directory instead:\n"
            f"  xmldrive mount ~/xml"
        )

    # Check for existing FUSE mount at this path
    for m in find_all_fuse_mounts(fsname):
        if os.path.realpath(m["mountpoint"]) == resolved:
            if m["is_ours"]:
                return (
                    f"{resolved} already has an xmldrive mount active.\n"
                    f"Unmount first: xmldrive unmount {resolved}"
                )
            return (
                f"{resolved} is already a FUSE mount ({m['source']}, type {m['fstype']}).\n"
                f"Choose a different path, or unmount the existing mount first."
            )

    # Check for non-empty existing directory
    if os.path.isdir(resolved) and not allow_non_empty:
        try:
            contents = os.listdir(resolved)
        except PermissionError:
            return f"Cannot read {resolved}: permission denied."

        if contents:
            count = len(contents)
            return (
                f"{resolved} is not empty (contains {count} item{'s' if count != 1 else ''}).\n"
                f"\n"
                f"FUSE mounts shadow existing directory contents. Use an empty\n"
                f"directory, or pass --allow-non-empty."
            )

    return None


def ensure_mountpoint(path: str) -> Optional[str]:
    """Create mountpoint directory if needed. Returns error message or None."""
    if os.path.isdir(path):
        return None

    try:
        os.makedirs(path, exist_ok=True)
        return None
    except PermissionError:
        return f"Cannot create {path}: permission denied."
    except OSError as e:
        return f"Cannot create {path}: {e}"


# --- Mount discovery ---

def find_all_fuse_mounts(fsname: str = FSNAME) -> list[dict]:
    """Find all FUSE mounts on the system.

    Returns list of {"source": str, "mountpoint": str, "fstype": str, "is_ours": bool}.
    """
    mounts = []
    try:
        for line in Path("/proc/mounts").read_text().splitlines():
            parts = line.split()
            if len(parts) >= 3 and "fuse" in parts[2].lower() and parts[2] != "fusectl":
                mounts.append({
                    "source": parts[0],
                    "mountpoint": parts[1],
                    "fstype": parts[2],
                    "is_ours": parts[0] == fsname,
                })
    except OSError:
        pass
    return mounts


def fusermount_unmount(mountpoint: str) -> tuple[bool, str]:
    """Run fusermount -u to clean-unmount a FUSE mount. Returns (success, message)."""
    for tool in ("fusermount3", "fusermount"):
        try:
            result = subprocess.run(
                [tool, "-u", mountpoint],
                capture_output=True, text=True, timeout=10,
            )
        except FileNotFoundError:
            continue
        except subprocess.TimeoutExpired:
            return False, f"{tool} timed out on {mountpoint}"
        if result.returncode == 0:
            return True, f"Unmounted {mountpoint}"
        return False, f"{tool} failed: {result.stderr.strip()}"
    return False, "Neither fusermount3 nor fusermount found"
