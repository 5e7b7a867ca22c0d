from __future__ import annotations

import logging

import pytest

from kinfolk.config import ConfigurationError, configure_logging


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    quiet = {
        name: logging.getLogger(name).level
        for name in ("alembic.runtime.migration", "sqlalchemy.engine")
    }
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    for name, quiet_level in quiet.items():
        logging.getLogger(name).setLevel(quiet_level)


def test_level_comes_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("KINFOLK_LOG_LEVEL", "warning")

    configure_logging(force=True)

    assert logging.getLogger().level == logging.WARNING


def test_explicit_level_beats_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("KINFOLK_LOG_LEVEL", "ERROR")

    configure_logging(level=logging.DEBUG, force=True)

    assert logging.getLogger().level == logging.DEBUG
    assert logging.getLogger("alembic.runtime.migration").level == logging.NOTSET


def test_migration_chatter_quiet_at_info(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("KINFOLK_LOG_LEVEL", raising=False)

    configure_logging(force=True)

    assert logging.getLogger().level == logging.INFO
    assert logging.getLogger("alembic.runtime.migration").level == logging.WARNING


def test_unknown_level_name_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("KINFOLK_LOG_LEVEL", "chatty")

    with pytest.raises(ConfigurationError):
        configure_logging(force=True)
