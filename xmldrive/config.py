"""
Configuration management for xmldrive.

Settings live in $XDG_CONFIG_HOME/xmldrive/config.json (default
~/.config/xmldrive/config.json). Every key is optional:

    {
      "backing_dir": "food",
      "fsname": "xmldrive",
      "debug": false,
      "write": {"offset_writes": "ignore", "report_writable": false}
    }

Resolution (highest → lowest):
  1. CLI arguments
  2. config.json
  3. Built-in defaults
"""

import fcntl
import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

log = logging.getLogger(__name__)

DEFAULT_BACKING_DIR = "food"

OFFSET_WRITES_IGNORE = "ignore"
OFFSET_WRITES_REJECT = "reject"
OFFSET_WRITE_MODES = frozenset({OFFSET_WRITES_IGNORE, OFFSET_WRITES_REJECT})


# --- Data classes ---

@dataclass
class WriteConfig:
    """Pseudo-file write behaviour.

    offset_writes: what to do with a write that doesn't start at offset 0.
      "ignore" reports it as fully written and changes nothing;
      "reject" fails it with EPERM.
    report_writable: advertise pseudo-files as 0644 instead of 0444.
    """
    offset_writes: str = OFFSET_WRITES_IGNORE
    report_writable: bool = False

    @property
    def reject_offset_writes(self) -> bool:
        return self.offset_writes == OFFSET_WRITES_REJECT


@dataclass
class DriveConfig:
    """Full xmldrive configuration."""
    backing_dir: str = DEFAULT_BACKING_DIR
    fsname: str = "xmldrive"
    debug: bool = False
    write: WriteConfig = field(default_factory=WriteConfig)


# --- Path helpers ---

def get_config_dir() -> Path:
    """Get xmldrive config directory (~/.config/xmldrive/)."""
    xdg_config = os.environ.get("XDG_CONFIG_HOME", os.path.expanduser("~/.config"))
    return Path(xdg_config) / "xmldrive"

def get_config_path() -> Path:
    return get_config_dir() / "config.json"


# --- Read config.json ---

def read_config_file() -> Optional[dict]:
    """Read config.json. Returns None if not found or unreadable."""
    path = get_config_path()
    if not path.exists():
        return None
    try:
        with open(path, "r") as f:
            fcntl.flock(f, fcntl.LOCK_SH)
            try:
                data = json.load(f)
            finally:
                fcntl.flock(f, fcntl.LOCK_UN)
    except (json.JSONDecodeError, OSError) as e:
        log.warning(f"Could not read config at {path}: {e}")
        return None
    if not isinstance(data, dict):
        log.warning(f"Ignoring config at {path}: expected a JSON object")
        return None
    return data


def _parse_write_config(data) -> WriteConfig:
    if not isinstance(data, dict):
        log.warning(f"Ignoring 'write' section: expected a JSON object, got {type(data).__name__}")
        return WriteConfig()
    offset_writes = data.get("offset_writes", OFFSET_WRITES_IGNORE)
    if offset_writes not in OFFSET_WRITE_MODES:
        log.warning(f"Unknown offset_writes mode {offset_writes!r}, using {OFFSET_WRITES_IGNORE!r}")
        offset_writes = OFFSET_WRITES_IGNORE
    return WriteConfig(
        offset_writes=offset_writes,
        report_writable=bool(data.get("report_writable", False)),
    )


def load_config(
    cli_backing_dir: Optional[str] = None,
    cli_debug: bool = False,
) -> DriveConfig:
    """Load configuration with CLI overrides applied on top."""
    config = DriveConfig()

    data = read_config_file()
    if data:
        config.backing_dir = data.get("backing_dir", config.backing_dir)
        config.fsname = data.get("fsname", config.fsname)
        config.debug = bool(data.get("debug", config.debug))
        config.write = _parse_write_config(data.get("write", {}))

    if cli_backing_dir:
        config.backing_dir = cli_backing_dir
    if cli_debug:
        config.debug = True

    return config


def config_to_dict(config: DriveConfig) -> dict:
    """Serialize a DriveConfig to a JSON-safe dict."""
    return {
        "backing_dir": config.backing_dir,
        "fsname": config.fsname,
        "debug": config.debug,
        "write": {
            "offset_writes": config.write.offset_writes,
            "report_writable": config.write.report_writable,
        },
    }
