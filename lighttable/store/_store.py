from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from ..kv import KeyValueStore
from ..page_codec import decode_blob, encode_blob
from ..types import Blob, PageEntry, StoreStats
from . import named as store_named

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "lighttable"


class HighlightStore:
    """Read-modify-write access to the sharded highlight blob.

    Every save reads the whole blob, swaps in one page's entry and writes the
    whole blob back. There is no locking: the last writer wins.
    """

    def __init__(self, kv: KeyValueStore, storage_key: str = DEFAULT_STORAGE_KEY):
        self.kv = kv
        self.storage_key = storage_key

    def _read_json(self, key: str) -> Any:
        raw = self.kv.get_item(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.warning("ignoring unparseable value at %s", key, exc_info=exc)
            return None

    def _write_json(self, key: str, data: Mapping[str, Any]) -> None:
        self.kv.set_item(key, json.dumps(data, separators=(",", ":")))

    def read_blob(self) -> Blob:
        data = self._read_json(self.storage_key)
        if not isinstance(data, dict):
            if data is not None:
                logger.warning("ignoring non-object blob at %s", self.storage_key)
            return {}
        return data

    def read_pages(self) -> dict[str, PageEntry]:
        return decode_blob(self.read_blob())

    def write_pages(self, pages: Mapping[str, PageEntry]) -> None:
        self._write_json(self.storage_key, encode_blob(pages))

    def load(self, page_id: str, expected_groups: int) -> PageEntry:
        entry = self.read_pages().get(page_id, [])
        if len(entry) != expected_groups:
            logger.debug(
                "resizing %s from %d to %d groups", page_id, len(entry), expected_groups
            )
        # Trailing groups are dropped since there is no way to tell which
        # group was removed.
        del entry[expected_groups:]
        while len(entry) < expected_groups:
            entry.append([])
        return entry

    def save(self, page_id: str, entry: PageEntry) -> None:
        pages = self.read_pages()
        pages[page_id] = [list(vector) for vector in entry]
        self.write_pages(pages)

    def forget(self, page_id: str) -> bool:
        pages = self.read_pages()
        if page_id not in pages:
            return False
        del pages[page_id]
        self.write_pages(pages)
        return True

    def close(self) -> None:
        close = getattr(self.kv, "close", None)
        if close is not None:
            close()

    def named_key(self, group_id: str) -> str:
        return store_named.named_key(self, group_id)

    def load_named(self, group_id: str) -> dict[str, int] | None:
        return store_named.load_named(self, group_id)

    def save_named(self, group_id: str, items: Mapping[str, int]) -> None:
        store_named.save_named(self, group_id, items)

    def named_groups(self) -> list[str]:
        return store_named.named_groups(self)

    def stats(self) -> StoreStats:
        raw = self.kv.get_item(self.storage_key) or ""
        blob = self.read_blob()
        pages = decode_blob(blob)
        return {
            "storage_key": self.storage_key,
            "shards": len(blob),
            "pages": len(pages),
            "groups": sum(len(entry) for entry in pages.values()),
            "blob_bytes": len(raw.encode("utf-8")),
            "named_groups": len(self.named_groups()),
        }
