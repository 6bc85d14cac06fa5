from __future__ import annotations

from ._store import DEFAULT_STORAGE_KEY, HighlightStore

__all__ = [
    "DEFAULT_STORAGE_KEY",
    "HighlightStore",
]
