"""Run and inspect the kinfolk schema migrations.

Alembic settings live in the ``[tool.alembic]`` table of ``pyproject.toml``.
An installed package has no pyproject beside it, so the bundled scripts in
this directory are the fallback.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import TYPE_CHECKING, Final

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory

from kinfolk.config import get_database_config

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

PROJECT_ROOT: Final[Path] = Path(__file__).resolve().parents[5]
PYPROJECT_PATH: Final[Path] = PROJECT_ROOT / "pyproject.toml"
MIGRATIONS_PATH: Final[Path] = Path(__file__).resolve().parent
_PATH_OPTIONS: Final[frozenset[str]] = frozenset({"script_location", "prepend_sys_path"})

log = logging.getLogger(__name__)


def _pyproject_options() -> dict[str, str]:
    if not PYPROJECT_PATH.exists():
        return {}
    with PYPROJECT_PATH.open("rb") as handle:
        section = tomllib.load(handle).get("tool", {}).get("alembic", {})
    return {str(key): str(value) for key, value in section.items()}


def _project_path(raw: str) -> Path:
    path = Path(raw)
    return (path if path.is_absolute() else PROJECT_ROOT / path).resolve()


def alembic_config(*, database_uri: str | None = None) -> Config:
    """Build the Alembic config, optionally bound to ``database_uri``."""

    options = _pyproject_options()
    config = Config(toml_file=str(PYPROJECT_PATH)) if options else Config()

    scripts = _project_path(options["script_location"]) if "script_location" in options else None
    if scripts is None or not scripts.exists():
        scripts = MIGRATIONS_PATH
    config.set_main_option("script_location", str(scripts))
    config.set_main_option(
        "prepend_sys_path", str(_project_path(options.get("prepend_sys_path", ".")))
    )
    for key, value in options.items():
        if key not in _PATH_OPTIONS:
            config.set_main_option(key, value)
    if database_uri is not None:
        config.set_main_option("sqlalchemy.url", database_uri)
    return config


def head_revision() -> str | None:
    """Newest revision shipped with the package."""

    return ScriptDirectory.from_config(alembic_config()).get_current_head()


def current_revision(engine: Engine) -> str | None:
    """Revision recorded in the database, ``None`` for an unmigrated one."""

    with engine.connect() as connection:
        return MigrationContext.configure(connection).get_current_revision()


def upgrade_head(*, engine: Engine | None = None, database_uri: str | None = None) -> None:
    """Bring the schema to the newest revision.

    With ``engine`` the upgrade runs on one of its connections; otherwise on
    ``database_uri`` or the configured database.
    """

    if engine is None:
        uri = database_uri or get_database_config().uri
        command.upgrade(alembic_config(database_uri=uri), "head")
        return
    config = alembic_config()
    with engine.begin() as connection:
        config.attributes["connection"] = connection
        command.upgrade(config, "head")
    log.debug("Schema at %s", head_revision())
