"""
API route modules for loads and receipts.

This package contains subrouters for:
- Loads: load CRUD, listing filters, receipt attachment, cascading delete
- Receipts: upload/download URLs, merged listing, standalone ledger, delete by reference

Routers are included from src.api.main (under the /api/v1 prefix).
"""
