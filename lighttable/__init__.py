from __future__ import annotations

from .hashing import hash_page_name
from .kv import MemoryKeyValueStore, SqliteKeyValueStore, storage_available
from .page_codec import decode_blob, encode_blob
from .session import AutosortPendingError, HighlightSession
from .store import HighlightStore
from .types import TableLayout
from .vector_codec import decode_vector, encode_vector

__all__ = [
    "AutosortPendingError",
    "HighlightSession",
    "HighlightStore",
    "MemoryKeyValueStore",
    "SqliteKeyValueStore",
    "TableLayout",
    "decode_blob",
    "decode_vector",
    "encode_blob",
    "encode_vector",
    "hash_page_name",
    "storage_available",
]

__version__ = "0.1.0"
