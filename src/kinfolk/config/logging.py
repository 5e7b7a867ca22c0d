"""Logging setup for the kinfolk CLI and services."""

from __future__ import annotations

import logging

from .env import log_level_env

LOG_LEVEL_ENV = "KINFOLK_LOG_LEVEL"
# chatty at INFO; only surfaced when kinfolk itself runs at DEBUG
_QUIET_LOGGERS = ("alembic.runtime.migration", "sqlalchemy.engine")


def configure_logging(*, level: int | None = None, force: bool = False) -> None:
    """Initialise the root logger.

    ``level`` wins over ``KINFOLK_LOG_LEVEL``, which wins over INFO. Migration
    and engine chatter is kept at WARNING unless the effective level is DEBUG.
    Pass ``force=True`` to reconfigure an already configured root logger.
    """

    effective = level if level is not None else log_level_env(LOG_LEVEL_ENV, logging.INFO)
    logging.basicConfig(
        level=effective,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
    quiet_level = logging.NOTSET if effective <= logging.DEBUG else logging.WARNING
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)
