import logging
from datetime import datetime
from typing import Dict, Iterator, Optional, Tuple

from lms.catalog import CatalogStore
from lms.errors import (
    ItemAlreadyCheckedOut,
    ItemNotCheckedOut,
    ItemNotFound,
    MemberNotFound,
    NoCopiesAvailable,
)
from lms.item import CatalogItem, CheckoutRecord
from lms.member import Member

logger = logging.getLogger(__name__)


class CirculationLedger:
    """Members and the items checked out to them.

    The ledger updates the catalog's availability counts as items go out and
    come back. Every operation validates first and mutates last, so a failed
    call leaves both the ledger and the catalog untouched.
    """

    def __init__(self, catalog: CatalogStore) -> None:
        self.catalog = catalog
        self._members: Dict[int, Member] = {}
        self._last_member_id = 0

    def __len__(self) -> int:
        return len(self._members)

    # ------------------------- Members ------------------------- #
    def register_member(self, first_name: Optional[str] = None, last_name: Optional[str] = None) -> Member:
        # Members are never removed, so this equals len(members) + 1.
        self._last_member_id += 1
        member = Member(id=self._last_member_id, first_name=first_name, last_name=last_name)
        self._members[member.id] = member
        logger.info(f"Registered member {member.id}")
        return member

    def lookup_member(self, member_id: int) -> Member:
        member = self._members.get(member_id)
        if member is None:
            raise MemberNotFound()
        return member

    def members(self) -> Iterator[Member]:
        return iter(self._members.values())

    # ------------------------- Issue ------------------------- #
    def issue_to_existing_member(self, item_id: int, member_id: int, now: datetime) -> CheckoutRecord:
        member = self._members.get(member_id)
        if member is None:
            raise MemberNotFound("Invalid Member ID!")
        item = self._issuable_item(item_id)
        if member.holds(item_id):
            raise ItemAlreadyCheckedOut()
        return self._issue(item, member, now)

    def issue_to_new_member(
        self,
        item_id: int,
        first_name: Optional[str],
        last_name: Optional[str],
        now: datetime,
    ) -> Tuple[Member, CheckoutRecord]:
        item = self._issuable_item(item_id)
        member = self.register_member(first_name, last_name)
        return member, self._issue(item, member, now)

    def _issuable_item(self, item_id: int) -> CatalogItem:
        item = self.catalog.lookup(item_id)
        if item.avail_copies == 0:
            raise NoCopiesAvailable()
        return item

    def _issue(self, item: CatalogItem, member: Member, now: datetime) -> CheckoutRecord:
        record = item.create_checkout(now)
        member.checkouts[item.id] = record
        logger.info(f"Issued item {item.id} to member {member.id}, due {record.due_date:%Y-%m-%d}")
        return record

    # ------------------------- Return / renew ------------------------- #
    def return_item(self, item_id: int, member_id: int) -> CatalogItem:
        member = self.lookup_member(member_id)
        if not member.holds(item_id):
            raise ItemNotCheckedOut()
        if item_id not in self.catalog:
            # Items are never deleted, so this means the ledger and catalog disagree.
            logger.error(f"Member {member_id} holds item {item_id} which is not in the catalog")
            raise ItemNotFound("Book not found in library items")

        del member.checkouts[item_id]
        item = self.catalog.lookup(item_id)
        item.avail_copies += 1
        logger.info(f"Member {member_id} returned item {item_id}")
        return item

    def renew(self, item_id: int, member_id: int) -> CheckoutRecord:
        member = self.lookup_member(member_id)
        record = member.checkouts.get(item_id)
        if record is None:
            raise ItemNotCheckedOut()
        renewed = record.renewed()
        member.checkouts[item_id] = renewed
        logger.info(f"Renewed item {item_id} for member {member_id}, due {renewed.due_date:%Y-%m-%d}")
        return renewed
