import csv
import logging
from typing import Dict, Iterable, Iterator, Mapping, Optional

from lms.errors import ItemNotFound, LoadFailed
from lms.item import CatalogItem

logger = logging.getLogger(__name__)


class CatalogStore:
    """Catalog items keyed by id."""

    def __init__(self) -> None:
        self._items: Dict[int, CatalogItem] = {}

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._items

    def load(self, rows: Iterable[Mapping[str, Optional[str]]]) -> int:
        """Add every valid row to the store and return how many were loaded.

        Malformed rows are logged and skipped. Row numbers count the header as
        row 1, so the first data row is row 2. A later row with an id already
        in the store replaces the earlier entry.
        """
        count = 0
        for row_number, row in enumerate(rows, start=2):
            try:
                item = CatalogItem.from_dict(row)
            except ValueError as e:
                logger.warning(f"Failed to parse row {row_number}: {e}")
                continue
            if item.id in self._items:
                logger.info(f"Row {row_number} replaces item {item.id}")
            self._items[item.id] = item
            count += 1

        logger.info(f"Loaded {count} items into library")
        if count == 0:
            raise LoadFailed()
        return count

    def lookup(self, item_id: int) -> CatalogItem:
        item = self._items.get(item_id)
        if item is None:
            raise ItemNotFound()
        return item

    def items(self) -> Iterator[CatalogItem]:
        return iter(self._items.values())


def read_catalog_csv(path: str) -> Iterator[Dict[str, Optional[str]]]:
    """Yield the rows of a headed catalog CSV file as dicts.

    The file is read eagerly so an unreadable path fails here rather than
    halfway through a load.
    """
    try:
        with open(path, "r", newline="", encoding="utf-8-sig") as f:
            rows = list(csv.DictReader(f))
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        logger.error(f"Failed to open catalog file {path}: {e}")
        raise LoadFailed(f"Could not read catalog file {path}: {e}") from e
    return iter(rows)
