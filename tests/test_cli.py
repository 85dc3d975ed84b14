"""Tests for the ``gateway-filters`` CLI and logging setup."""

from __future__ import annotations

import logging
import os
from unittest import mock

import pytest

from gateway_filters import __version__
from gateway_filters.cli import main
from gateway_filters.display.logging_config import setup_logging


@pytest.fixture(autouse=True)
def _no_logging_setup():
    # dictConfig would detach package loggers from pytest's capture handler.
    with mock.patch("gateway_filters.cli.setup_logging") as patched:
        yield patched


def _run(argv):
    with pytest.raises(SystemExit) as exc_info:
        main(argv)
    return exc_info.value.code


class TestCheckCommand:
    def test_prints_mappings(self, sample_filters_module, write_config, capsys):
        path = write_config(
            f"""
            version: "1"
            filters:
              cors:
                class: "{sample_filters_module}:CorsFilter"
                mappings:
                  - url_patterns: ["/api/*", "/v2/*"]
                    dispatcher_types: [REQUEST, ASYNC]
            """
        )
        assert _run(["check", path]) == 0

        out = capsys.readouterr().out
        assert "cors" in out
        assert "REQUEST,ASYNC" in out
        assert "/api/* /v2/*" in out
        assert f"class: {sample_filters_module}.CorsFilter" in out
        assert "1 filter(s) registered in context 'default'." in out

    def test_init_flag_initializes(self, sample_filters_module, write_config, capsys):
        path = write_config(
            f"""
            version: "1"
            filters:
              cors:
                class: "{sample_filters_module}:CorsFilter"
            """
        )
        assert _run(["check", path, "--init"]) == 0
        line = next(ln for ln in capsys.readouterr().out.splitlines() if ln.startswith("cors"))
        assert line.split()[1] == "yes"

    def test_empty_config(self, write_config, capsys):
        path = write_config('version: "1"\n')
        assert _run(["check", path]) == 0
        assert "no filters configured" in capsys.readouterr().out

    def test_config_error_exits_1(self, write_config, capsys):
        path = write_config(
            """
            version: "1"
            filters:
              bad:
                class: "m:C"
                mappings:
                  - url_patterns: ["/a/*/b"]
            """
        )
        assert _run(["check", path]) == 1
        assert "Configuration validation failed" in capsys.readouterr().err

    def test_missing_file_exits_1(self, tmp_path, capsys):
        assert _run(["check", str(tmp_path / "missing.yaml")]) == 1
        assert "does not exist" in capsys.readouterr().err

    def test_filter_module_import_error_exits_1(self, broken_filters_module, write_config, capsys):
        path = write_config(
            f"""
            version: "1"
            filters:
              broken:
                class: "{broken_filters_module}:Filter"
            """
        )
        assert _run(["check", path]) == 1
        err = capsys.readouterr().err
        assert f"Cannot import module '{broken_filters_module}'" in err
        assert "boom at import" in err

    def test_logging_configured_from_args(self, write_config, _no_logging_setup, tmp_path):
        path = write_config('version: "1"\n')
        _run(["check", path, "--log-level", "debug", "--log-dir", str(tmp_path)])
        _no_logging_setup.assert_called_once_with("debug", log_dir=str(tmp_path), quiet=True)


class TestParser:
    def test_no_command_exits_1(self, capsys):
        assert _run([]) == 1
        assert "check" in capsys.readouterr().out

    def test_version(self, capsys):
        assert _run(["--version"]) == 0
        assert __version__ in capsys.readouterr().out


class TestSetupLogging:
    @pytest.fixture(autouse=True)
    def _restore_logging(self):
        pkg_logger = logging.getLogger("gateway_filters")
        saved = (pkg_logger.handlers[:], pkg_logger.propagate, pkg_logger.level)
        root_saved = (logging.root.handlers[:], logging.root.level)
        yield
        for handler in pkg_logger.handlers:
            if handler not in saved[0]:
                handler.close()
        for handler in logging.root.handlers:
            if handler not in root_saved[0]:
                handler.close()
        pkg_logger.handlers, pkg_logger.propagate, pkg_logger.level = saved
        logging.root.handlers, logging.root.level = list(root_saved[0]), root_saved[1]
        for name in ("gateway_filters.filters", "gateway_filters.config"):
            child = logging.getLogger(name)
            child.handlers = []
            child.propagate = True
            child.setLevel(logging.NOTSET)

    def test_creates_log_file(self, tmp_path):
        log_fpath, level = setup_logging("debug", log_dir=str(tmp_path), quiet=True)

        assert level == "DEBUG"
        assert os.path.dirname(log_fpath) == str(tmp_path)
        logging.getLogger("gateway_filters.filters.holder").debug("hello from test")
        for handler in logging.getLogger("gateway_filters.filters").handlers:
            handler.flush()
        with open(log_fpath, encoding="utf-8") as f:
            assert "hello from test" in f.read()

    def test_invalid_level_falls_back(self, tmp_path, capsys):
        _, level = setup_logging("chatty", log_dir=str(tmp_path))
        assert level == "INFO"
        assert "invalid log level" in capsys.readouterr().out
