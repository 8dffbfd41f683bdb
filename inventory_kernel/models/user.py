"""
Module: inventory_kernel.models.user
Responsibility: Value object for a service user.
Architecture position: Kernel > Models.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class User:
    id: str
    username: str
    role: str
    created_at: str

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "username": self.username,
            "role": self.role,
            "created_at": self.created_at,
        }

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> User:
        return cls(
            id=record.get("id"),
            username=record.get("username"),
            role=record.get("role"),
            created_at=record.get("created_at"),
        )
