from __future__ import annotations

from pathlib import Path  # noqa: TC003

import pytest  # noqa: TC002

from kinfolk.config import ConfigurationError, get_database_config, get_storage_config
from kinfolk.config.storage import DEFAULT_DB_FILENAME, StorageConfig


def test_storage_config_prefers_explicit_env(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    custom = tmp_path / "custom-data"
    monkeypatch.setenv("KINFOLK_DATA_DIR", str(custom))

    config = get_storage_config()

    assert config.resolve_data_dir() == custom.resolve()


def test_database_config_uses_env_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URI", "sqlite:///override.db")

    assert get_database_config().uri == "sqlite:///override.db"


def test_database_config_creates_data_dir(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.delenv("DATABASE_URI", raising=False)
    monkeypatch.setenv("KINFOLK_DATA_DIR", str(tmp_path / "data-dir"))

    uri = get_database_config().uri

    expected_path = (tmp_path / "data-dir" / DEFAULT_DB_FILENAME).resolve()
    assert uri == f"sqlite+pysqlite:///{expected_path}"
    assert expected_path.parent.exists()


def test_database_path_without_creating(tmp_path: Path) -> None:
    config = StorageConfig(data_dir=tmp_path / "lazy")

    path = config.database_path(ensure=False)

    assert path.name == DEFAULT_DB_FILENAME
    assert not path.parent.exists()


def test_storage_config_reads_filename_override(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv("KINFOLK_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("KINFOLK_DB_FILENAME", "smiths.db")

    config = get_storage_config()

    assert config.database_path(ensure=False) == (tmp_path / "smiths.db").resolve()


@pytest.mark.parametrize(("raw", "expected"), [("yes", True), ("0", False), (None, False)])
def test_database_config_echo_flag(
    monkeypatch: pytest.MonkeyPatch, raw: str | None, *, expected: bool
) -> None:
    monkeypatch.setenv("DATABASE_URI", "sqlite://")
    if raw is None:
        monkeypatch.delenv("KINFOLK_DB_ECHO", raising=False)
    else:
        monkeypatch.setenv("KINFOLK_DB_ECHO", raw)

    config = get_database_config()

    assert config.echo is expected
    assert config.is_sqlite


def test_database_config_rejects_unknown_echo_flag(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URI", "sqlite://")
    monkeypatch.setenv("KINFOLK_DB_ECHO", "maybe")

    with pytest.raises(ConfigurationError) as exc:
        get_database_config()

    assert exc.value.setting == "KINFOLK_DB_ECHO"
