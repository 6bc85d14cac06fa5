from __future__ import annotations

from dataclasses import dataclass, field
from typing import TypedDict

BitVector = list[int]
PageEntry = list[BitVector]
Blob = dict[str, str]


@dataclass
class TableLayout:
    cell_count: int
    table_id: str | None = None
    # Item id per cell, only meaningful when table_id is set.
    row_ids: list[str | None] = field(default_factory=list)
    blocked: frozenset[int] = frozenset()
    autosort: bool = False


class StoreStats(TypedDict):
    storage_key: str
    shards: int
    pages: int
    groups: int
    blob_bytes: int
    named_groups: int
