"""Content store package.

Persistence collaborators for the Micropub endpoint. The endpoint only
depends on the ContentStore interface; SQLiteContentStore is the bundled
implementation.
"""
from store.base import ContentStore, ContentStoreError
from store.sqlite_store import SQLiteContentStore, slugify

__all__ = ["ContentStore", "ContentStoreError", "SQLiteContentStore", "slugify"]
