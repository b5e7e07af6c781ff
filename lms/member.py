from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from lms.item import CheckoutRecord


@dataclass
class Member:
    """A library member and the items currently checked out to them."""

    id: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    checkouts: Dict[int, CheckoutRecord] = field(default_factory=dict)

    @property
    def full_name(self) -> str:
        parts = [p for p in (self.first_name, self.last_name) if p]
        return " ".join(parts)

    def holds(self, item_id: int) -> bool:
        return item_id in self.checkouts

    def checkout_summary(self) -> str:
        """Titles currently held, e.g. ``"Dune (7), Alien (12)"``."""
        return ", ".join(f"{rec.title} ({rec.item_id})" for rec in self.checkouts.values())

    def snapshot(self) -> "Member":
        # Records are frozen, so a shallow copy of the mapping is enough.
        return Member(self.id, self.first_name, self.last_name, dict(self.checkouts))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "checkouts": [rec.to_dict() for rec in self.checkouts.values()],
        }
