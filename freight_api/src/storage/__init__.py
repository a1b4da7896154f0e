"""
Blob storage access: reference normalization and object store adapters.
"""

from .blob_store import BlobStore, HttpBlobStore, InMemoryBlobStore, build_blob_store
from .references import is_canonical, parse_storage_reference, try_parse_storage_reference

__all__ = [
    "BlobStore",
    "HttpBlobStore",
    "InMemoryBlobStore",
    "build_blob_store",
    "is_canonical",
    "parse_storage_reference",
    "try_parse_storage_reference",
]
