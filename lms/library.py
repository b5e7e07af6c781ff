import copy
import logging
from datetime import datetime, timezone
from threading import RLock
from typing import Callable, Iterable, Iterator, Mapping, Optional, Tuple

from lms.catalog import CatalogStore, read_catalog_csv
from lms.circulation import CirculationLedger
from lms.item import CatalogItem, CheckoutRecord
from lms.member import Member

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Library:
    """Owns the catalog and circulation state for one session.

    Each call takes the instance lock for its own duration only. Queries copy
    what they return while holding the lock, so callers can iterate the
    result after the lock is released without seeing later mutations.
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None) -> None:
        self.clock = clock or utc_now
        self._lock = RLock()
        self._catalog = CatalogStore()
        self._ledger = CirculationLedger(self._catalog)

    # ------------------------- Loading ------------------------- #
    def load_catalog(self, path: str) -> int:
        """Load catalog items from a headed CSV file. Returns the number loaded."""
        rows = read_catalog_csv(path)
        with self._lock:
            count = self._catalog.load(rows)
        logger.info(f"Catalog loaded from {path}")
        return count

    def load_rows(self, rows: Iterable[Mapping[str, Optional[str]]]) -> int:
        with self._lock:
            return self._catalog.load(rows)

    # ------------------------- Circulation ------------------------- #
    def register_member(self, first_name: Optional[str] = None, last_name: Optional[str] = None) -> Member:
        with self._lock:
            return self._ledger.register_member(first_name, last_name).snapshot()

    def issue_to_existing_member(self, item_id: int, member_id: int) -> CheckoutRecord:
        with self._lock:
            return self._ledger.issue_to_existing_member(item_id, member_id, self.clock())

    def issue_to_new_member(
        self, item_id: int, first_name: Optional[str] = None, last_name: Optional[str] = None
    ) -> Tuple[Member, CheckoutRecord]:
        with self._lock:
            member, record = self._ledger.issue_to_new_member(item_id, first_name, last_name, self.clock())
            return member.snapshot(), record

    def return_item(self, item_id: int, member_id: int) -> CatalogItem:
        with self._lock:
            return copy.copy(self._ledger.return_item(item_id, member_id))

    def renew(self, item_id: int, member_id: int) -> CheckoutRecord:
        with self._lock:
            return self._ledger.renew(item_id, member_id)

    # ------------------------- Queries ------------------------- #
    def lookup_item(self, item_id: int) -> CatalogItem:
        with self._lock:
            return copy.copy(self._catalog.lookup(item_id))

    def lookup_member(self, member_id: int) -> Member:
        with self._lock:
            return self._ledger.lookup_member(member_id).snapshot()

    def query_catalog(self) -> Iterator[CatalogItem]:
        with self._lock:
            snapshot = [copy.copy(item) for item in self._catalog.items()]
        return iter(snapshot)

    def query_members(self) -> Iterator[Member]:
        with self._lock:
            snapshot = [member.snapshot() for member in self._ledger.members()]
        return iter(snapshot)

    def get_statistics(self) -> dict:
        with self._lock:
            items = list(self._catalog.items())
            return {
                "total_items": len(items),
                "total_copies": sum(i.copies for i in items),
                "available_copies": sum(i.avail_copies for i in items),
                "members": len(self._ledger),
            }
