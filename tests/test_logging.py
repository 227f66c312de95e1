"""Tests for log level resolution and handler setup."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from workspacekit.config import reload_config, reset_config
from workspacekit.config.schema import LoggingConfig
from workspacekit.logging import (
    TRACE,
    VERBOSE,
    follow_config_reloads,
    get_logger,
    installed_handlers,
    reset_logging,
    resolve_level,
    setup_logging,
)


@pytest.fixture(autouse=True)
def clean_logging(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv("WSK_LOG", raising=False)
    reset_logging()
    yield
    reset_logging()


def read_log(path: Path) -> str:
    for handler in installed_handlers():
        handler.flush()
    return path.read_text(encoding="utf-8")


class TestResolveLevel:
    """Tests for resolve_level."""

    def test_default_is_info(self) -> None:
        assert resolve_level(None) == logging.INFO
        assert resolve_level(LoggingConfig()) == logging.INFO

    def test_named_level(self) -> None:
        assert resolve_level(LoggingConfig(level="debug")) == logging.DEBUG
        assert resolve_level(LoggingConfig(level="trace")) == TRACE

    def test_unknown_level_falls_back(self) -> None:
        assert resolve_level(LoggingConfig(level="loud")) == logging.INFO

    def test_verbose_wins(self) -> None:
        assert resolve_level(LoggingConfig(level="error", verbose=3)) == VERBOSE
        assert resolve_level(LoggingConfig(verbose=0)) == logging.ERROR
        assert resolve_level(LoggingConfig(verbose=9)) == TRACE


class TestSetupLogging:
    """Tests for installing and replacing handlers."""

    def test_file_handler_writes_area_and_level(self, tmp_path: Path) -> None:
        log_file = tmp_path / "wsk.log"

        handlers = setup_logging(LoggingConfig(file=str(log_file)))
        get_logger("session").warning("Failed to read file %s", "/a.ts")

        assert len(handlers) == 1
        assert "warning session: Failed to read file /a.ts" in read_log(log_file)

    def test_level_filters_records(self, tmp_path: Path) -> None:
        log_file = tmp_path / "wsk.log"

        setup_logging(LoggingConfig(file=str(log_file), verbose=1))
        get_logger("filetree").info("Cached file tree for P1")
        get_logger("filetree").warning("Tree too deep")

        text = read_log(log_file)
        assert "Cached file tree" not in text
        assert "warning filetree: Tree too deep" in text

    def test_wsk_log_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        log_file = tmp_path / "env.log"
        monkeypatch.setenv("WSK_LOG", str(log_file))

        setup_logging()
        get_logger().info("started")

        assert "info core: started" in read_log(log_file)

    def test_second_call_keeps_handlers(self, tmp_path: Path) -> None:
        first = setup_logging(LoggingConfig(file=str(tmp_path / "a.log")))
        second = setup_logging(LoggingConfig(file=str(tmp_path / "b.log")))

        assert second == first
        assert not (tmp_path / "b.log").exists()

    def test_force_replaces_handlers(self, tmp_path: Path) -> None:
        setup_logging(LoggingConfig(file=str(tmp_path / "a.log")))
        setup_logging(LoggingConfig(file=str(tmp_path / "b.log"), level="debug"), force=True)

        get_logger("mentions").debug("Rebuilt mention index")

        assert len(installed_handlers()) == 1
        assert get_logger().level == logging.DEBUG
        assert "Rebuilt mention index" in read_log(tmp_path / "b.log")
        assert "Rebuilt mention index" not in (tmp_path / "a.log").read_text(encoding="utf-8")

    def test_reset_detaches_only_own_handlers(self, tmp_path: Path) -> None:
        foreign = logging.NullHandler()
        get_logger().addHandler(foreign)
        try:
            setup_logging(LoggingConfig(file=str(tmp_path / "a.log")))
            reset_logging()

            assert installed_handlers() == []
            assert foreign in get_logger().handlers
            assert get_logger().level == logging.NOTSET
        finally:
            get_logger().removeHandler(foreign)

    def test_unwritable_log_file_does_not_raise(self, tmp_path: Path) -> None:
        missing_dir = tmp_path / "missing" / "wsk.log"

        handlers = setup_logging(LoggingConfig(file=str(missing_dir)))

        assert all(not isinstance(h, logging.FileHandler) for h in handlers)


class TestFollowConfigReloads:
    """Tests for reconfiguring logging on config reload."""

    def test_reload_switches_log_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
        monkeypatch.delenv("WSK_TREE_DEPTH", raising=False)
        project = tmp_path / "proj"
        (project / ".wsk").mkdir(parents=True)
        log_file = tmp_path / "reloaded.log"
        (project / ".wsk" / "config.yaml").write_text(f"logging:\n  file: {log_file}\n")
        setup_logging(LoggingConfig(file=str(tmp_path / "before.log")))

        stop = follow_config_reloads()
        try:
            reload_config(project_root=str(project))
        finally:
            stop()
            reset_config()
        get_logger("config").info("reloaded")

        assert "info config: reloaded" in read_log(log_file)


def test_child_loggers() -> None:
    assert get_logger().name == "workspacekit"
    assert get_logger("session").name == "workspacekit.session"
