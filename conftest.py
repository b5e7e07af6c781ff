from datetime import datetime, timezone

import pytest

from lms.library import Library

CATALOG_HEADER = "title,author,year,edition,desc,format,id,copies,avail_copies,ratings\n"
CATALOG_ROWS = (
    "Dune,Frank Herbert,1965,1st,Desert planet,book,7,2,2,5\n"
    "Alien,,1979,Director's Cut,Space horror,Movie,12,1,1,4\n"
    "Atlas of Maps,Various,2001,2nd,Road maps,atlas,20,3,0,3\n"
)

# Jan 31 so month advances exercise end-of-month clamping
FIXED_NOW = datetime(2024, 1, 31, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def catalog_csv(tmp_path):
    path = tmp_path / "catalog.csv"
    path.write_text(CATALOG_HEADER + CATALOG_ROWS, encoding="utf-8")
    return str(path)


@pytest.fixture
def lib(catalog_csv):
    # Fresh session per test: fixed clock and sample catalog
    library = Library(clock=lambda: FIXED_NOW)
    library.load_catalog(catalog_csv)
    return library
