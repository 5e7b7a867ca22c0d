"""Bulk import defaults."""

from __future__ import annotations

from dataclasses import dataclass

from .env import positive_int_env
from .errors import ConfigurationError

DEFAULT_EDGE_BATCH_SIZE = 500
EDGE_BATCH_SIZE_ENV = "KINFOLK_EDGE_BATCH_SIZE"


@dataclass(frozen=True, slots=True)
class ImportConfig:
    edge_batch_size: int = DEFAULT_EDGE_BATCH_SIZE

    def __post_init__(self) -> None:
        if self.edge_batch_size <= 0:
            raise ConfigurationError(
                f"edge_batch_size must be positive, got {self.edge_batch_size}"
            )


def get_import_config() -> ImportConfig:
    return ImportConfig(
        edge_batch_size=positive_int_env(EDGE_BATCH_SIZE_ENV, DEFAULT_EDGE_BATCH_SIZE),
    )
