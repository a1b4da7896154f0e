"""
ORM models for freight loads and standalone receipts.

Importing this package ensures model classes are registered with the Base
metadata for Alembic and runtime usage.
"""

from .loads import (  # noqa: F401
    Load,
    Receipt,
)
