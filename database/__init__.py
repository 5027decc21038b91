# database/__init__.py

from .manager import RecordStore, build_store_url
from .migrations import ensure_schema, metadata

__all__ = ['RecordStore', 'build_store_url', 'ensure_schema', 'metadata']
