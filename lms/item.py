from __future__ import annotations

import calendar
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from lms.errors import NoCopiesAvailable

# Months a checkout runs for, keyed by lower-cased format tag.
RENEWAL_MONTHS: Dict[str, int] = {
    "book": 1,
    "movie": 2,
}

CSV_COLUMNS = (
    "title", "author", "year", "edition", "desc",
    "format", "id", "copies", "avail_copies", "ratings",
)
_INT_COLUMNS = ("year", "id", "copies", "avail_copies", "ratings")


def renewal_factor(format_tag: str) -> int:
    """Return the number of months a checkout of this format lasts (0 if unknown)."""
    return RENEWAL_MONTHS.get((format_tag or "").strip().lower(), 0)


def add_months(moment: datetime, months: int) -> datetime:
    """Advance ``moment`` by whole calendar months, clamping to the month's last day."""
    if months == 0:
        return moment
    index = moment.month - 1 + months
    year = moment.year + index // 12
    month = index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


@dataclass(frozen=True)
class CheckoutRecord:
    """Snapshot of an item taken when it was issued to a member."""

    title: str
    item_id: int
    renew_factor: int
    due_date: datetime
    notice: bool = False

    def renewed(self) -> "CheckoutRecord":
        return replace(self, due_date=add_months(self.due_date, self.renew_factor))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "item_id": self.item_id,
            "renew_factor": self.renew_factor,
            "due_date": self.due_date.isoformat(),
            "notice": self.notice,
        }


@dataclass
class CatalogItem:
    """A title in the catalog with its total and available copy counts."""

    id: int
    title: str
    author: Optional[str] = None
    year: int = 0
    edition: str = ""
    desc: str = ""
    format: str = ""
    copies: int = 0
    avail_copies: int = 0
    ratings: int = 0

    def __str__(self) -> str:
        return f"{self.title} (ID: {self.id})"

    def create_checkout(self, issued_at: datetime) -> CheckoutRecord:
        """Take one copy off the shelf and return the checkout snapshot for it."""
        if self.avail_copies <= 0:
            raise NoCopiesAvailable()
        factor = renewal_factor(self.format)
        self.avail_copies -= 1
        return CheckoutRecord(
            title=self.title,
            item_id=self.id,
            renew_factor=factor,
            due_date=add_months(issued_at, factor),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "author": self.author,
            "year": self.year,
            "edition": self.edition,
            "desc": self.desc,
            "format": self.format,
            "copies": self.copies,
            "avail_copies": self.avail_copies,
            "ratings": self.ratings,
        }

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> "CatalogItem":
        """Build an item from one tabular row, raising ValueError if the row is malformed."""
        missing = [col for col in CSV_COLUMNS if data.get(col) is None]
        if missing:
            raise ValueError(f"missing field(s): {', '.join(missing)}")

        numbers: Dict[str, int] = {}
        for col in _INT_COLUMNS:
            raw = str(data[col]).strip()
            try:
                value = int(raw)
            except ValueError:
                raise ValueError(f"field '{col}' is not an integer: {raw!r}") from None
            if value < 0:
                raise ValueError(f"field '{col}' must not be negative: {value}")
            numbers[col] = value

        if numbers["avail_copies"] > numbers["copies"]:
            raise ValueError(
                f"avail_copies ({numbers['avail_copies']}) exceeds copies ({numbers['copies']})"
            )

        author = str(data["author"]).strip()
        return CatalogItem(
            id=numbers["id"],
            title=str(data["title"]),
            author=author or None,
            year=numbers["year"],
            edition=str(data["edition"]),
            desc=str(data["desc"]),
            format=str(data["format"]),
            copies=numbers["copies"],
            avail_copies=numbers["avail_copies"],
            ratings=numbers["ratings"],
        )
