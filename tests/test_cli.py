"""Tests for xmldrive CLI subcommands and helpers."""

import json
import os
import sys
import pytest
from argparse import Namespace
from unittest.mock import patch, MagicMock

from xmldrive.cli import (
    _supports_color,
    _bold, _green, _red, _dim,
    cmd_convert, cmd_mount, cmd_unmount, cmd_config,
    build_fuse_options, _run_mount,
    EXIT_OK, EXIT_FAILURE,
)
from xmldrive.config import DriveConfig, WriteConfig
from xmldrive.main import main, parse_args


class TestAnsiHelpers:
    """Tests for ANSI color formatting."""

    def test_supports_color_false_with_no_color_env(self):
        with patch.dict(os.environ, {"NO_COLOR": "1"}):
            assert _supports_color() is False

    def test_supports_color_false_without_tty(self):
        with patch.dict(os.environ, {}, clear=True):
            mock_stdout = MagicMock()
            mock_stdout.isatty.return_value = False
            with patch.object(sys, "stdout", mock_stdout):
                assert _supports_color() is False

    def test_supports_color_true_with_tty(self):
        env = {k: v for k, v in os.environ.items() if k != "NO_COLOR"}
        with patch.dict(os.environ, env, clear=True):
            mock_stdout = MagicMock()
            mock_stdout.isatty.return_value = True
            with patch.object(sys, "stdout", mock_stdout):
                assert _supports_color() is True

    def test_red_with_color(self):
        with patch("xmldrive.cli._use_color", return_value=True):
            assert "\033[31m" in _red("err")

    def test_all_helpers_passthrough_without_color(self):
        with patch("xmldrive.cli._use_color", return_value=False):
            for fn in (_bold, _green, _red, _dim):
                assert fn("text") == "text"


class TestParseArgs:

    def test_mount_defaults(self):
        args = parse_args(["mount", "/mnt/books"])
        assert args.mountpoint == "/mnt/books"
        assert args.backing_dir is None
        assert args.allow_non_empty is False
        assert args.debug is False
        assert args.func is cmd_mount

    def test_mount_with_backing_dir_and_flags(self):
        args = parse_args(["--debug", "mount", "/mnt/books", "data", "--allow-non-empty"])
        assert args.backing_dir == "data"
        assert args.allow_non_empty is True
        assert args.debug is True

    def test_convert(self):
        args = parse_args(["convert", "books.xml", "food"])
        assert (args.source, args.target) == ("books.xml", "food")
        assert args.func is cmd_convert

    def test_missing_command_is_usage_error(self):
        with pytest.raises(SystemExit) as exc_info:
            parse_args([])
        assert exc_info.value.code == 2

    def test_mount_requires_mountpoint(self):
        with pytest.raises(SystemExit) as exc_info:
            parse_args(["mount"])
        assert exc_info.value.code == 2


class TestCmdConvert:

    def test_success(self, tmp_path, capsys):
        source = tmp_path / "a.xml"
        source.write_text("<a x='1'><b/></a>")
        target = tmp_path / "food"
        assert cmd_convert(Namespace(source=str(source), target=str(target))) == EXIT_OK
        assert (target / "0_a" / "attr.txt").read_bytes() == b"x=1\r\n"
        assert "2 elements" in capsys.readouterr().out

    def test_parse_failure(self, tmp_path, capsys):
        source = tmp_path / "bad.xml"
        source.write_text("<a>")
        assert cmd_convert(Namespace(source=str(source), target=str(tmp_path / "out"))) == EXIT_FAILURE
        assert "Error" in capsys.readouterr().err

    def test_via_main(self, tmp_path):
        source = tmp_path / "a.xml"
        source.write_text("<a>hi</a>")
        assert main(["convert", str(source), str(tmp_path / "food")]) == EXIT_OK
        assert (tmp_path / "food" / "0_a" / "inner.txt").read_bytes() == b"hi"


class TestCmdMount:

    def _args(self, mountpoint, **kwargs):
        defaults = {"mountpoint": str(mountpoint), "backing_dir": None,
                    "allow_non_empty": False, "debug": False}
        defaults.update(kwargs)
        return Namespace(**defaults)

    def test_validation_failure_does_not_mount(self, tmp_path, capsys):
        with patch("xmldrive.cli.load_config", return_value=DriveConfig()), \
             patch("xmldrive.cli.validate_mountpoint", return_value="is not empty"), \
             patch("xmldrive.cli._run_mount") as run:
            assert cmd_mount(self._args(tmp_path)) == EXIT_FAILURE
            run.assert_not_called()
        assert "is not empty" in capsys.readouterr().err

    def test_mounts_with_resolved_config(self, tmp_path):
        mountpoint = tmp_path / "mnt"
        with patch("xmldrive.config.get_config_path", return_value=tmp_path / "missing.json"), \
             patch("xmldrive.cli.validate_mountpoint", return_value=None), \
             patch("xmldrive.cli._run_mount") as run:
            assert cmd_mount(self._args(mountpoint, backing_dir="data")) == EXIT_OK
        assert mountpoint.is_dir()
        called_mountpoint, config = run.call_args[0]
        assert called_mountpoint == os.path.realpath(mountpoint)
        assert config.backing_dir == "data"

    def test_validates_against_configured_fsname(self, tmp_path):
        config = DriveConfig(fsname="books")
        with patch("xmldrive.cli.load_config", return_value=config), \
             patch("xmldrive.cli.validate_mountpoint", return_value=None) as validate, \
             patch("xmldrive.cli._run_mount"):
            cmd_mount(self._args(tmp_path / "mnt"))
        assert validate.call_args.kwargs["fsname"] == "books"

    def test_run_mount_passes_options_without_default_permissions(self, catalog_dir, tmp_path):
        pyfuse3 = pytest.importorskip("pyfuse3")
        config = DriveConfig(backing_dir=str(catalog_dir), fsname="books")
        with patch.object(pyfuse3, "init") as init, \
             patch.object(pyfuse3, "close"), \
             patch("trio.run"):
            _run_mount(str(tmp_path / "mnt"), config)
        fs, mountpoint, options = init.call_args[0]
        assert "default_permissions" not in options
        assert "fsname=books" in options
        assert fs.namespace.list("/") == [".", "..", "0_catalog"]


class TestBuildFuseOptions:

    def test_drops_default_permissions(self):
        options = build_fuse_options(DriveConfig(), frozenset({"default_permissions"}))
        assert "default_permissions" not in options
        assert "fsname=xmldrive" in options

    def test_dropped_even_when_reporting_writable(self):
        config = DriveConfig(write=WriteConfig(report_writable=True))
        assert "default_permissions" not in build_fuse_options(config, {"default_permissions"})

    def test_debug_option(self):
        assert "debug" in build_fuse_options(DriveConfig(debug=True), frozenset())
        assert "debug" not in build_fuse_options(DriveConfig(), frozenset())


class TestCmdUnmount:

    def test_success(self, capsys):
        with patch("xmldrive.cli.fusermount_unmount", return_value=(True, "Unmounted")):
            assert cmd_unmount(Namespace(mountpoint="/mnt/books")) == EXIT_OK
        assert "unmounted" in capsys.readouterr().out

    def test_failure(self, capsys):
        with patch("xmldrive.cli.fusermount_unmount", return_value=(False, "not mounted")):
            assert cmd_unmount(Namespace(mountpoint="/mnt/books")) == EXIT_FAILURE
        assert "not mounted" in capsys.readouterr().err


class TestCmdConfig:

    def test_prints_resolved_json(self, tmp_path, capsys):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"backing_dir": "/srv/books"}))
        with patch("xmldrive.cli.get_config_path", return_value=path), \
             patch("xmldrive.config.get_config_path", return_value=path), \
             patch("xmldrive.cli._use_color", return_value=False):
            assert cmd_config(Namespace()) == EXIT_OK
        out = capsys.readouterr().out
        assert "(exists)" in out
        assert '"backing_dir": "/srv/books"' in out
