"""Library Circulation - Core Package

This package contains the in-memory library state model:
- Catalog items and checkout records (item.py)
- Members (member.py)
- Catalog store and CSV ingestion (catalog.py)
- Circulation ledger: issue, return, renew (circulation.py)
- Lock-guarded service object used by the CLI (library.py)
"""
