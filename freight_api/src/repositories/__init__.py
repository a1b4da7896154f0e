"""
Repository layer for data access.

Repositories encapsulate SQLAlchemy queries for loads and the standalone
receipt ledger. They flush but never commit; services own the transaction.
"""

from .loads import LoadRepository  # noqa: F401
from .receipts import StandaloneReceiptRepository  # noqa: F401
