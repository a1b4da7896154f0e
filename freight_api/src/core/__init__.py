"""
Core application utilities for settings, logging, errors and FastAPI dependencies.

This package provides:
- Application-level settings (separate from DB settings)
- Structured logging with request correlation ids
- The domain error taxonomy shared by services and exception handlers
- Dependency helpers (DB session, blob store, receipt services)
"""
