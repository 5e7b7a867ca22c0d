"""Family aggregate root."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from kinfolk.domain.model.entity import Entity
from kinfolk.domain.model.enums import EntityType


@dataclass(eq=False, kw_only=True)
class Family(Entity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.FAMILY

    name: str
    description: str | None = None
    is_public: bool = False
