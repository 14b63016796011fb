"""Deals scope every fact, review and alert resolution."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .facts import new_id, require_text, utc_now

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID


@dataclass(eq=False, kw_only=True)
class Deal:
    id: UUID = field(default_factory=new_id)
    owner_id: str
    name: str
    created_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        self.owner_id = require_text(self.owner_id, field_name="ownerId")
        self.name = require_text(self.name, field_name="name")

    def is_owned_by(self, user_id: str) -> bool:
        return self.owner_id == user_id
