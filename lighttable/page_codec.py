from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from .hashing import shard_key
from .types import Blob, PageEntry
from .vector_codec import decode_vector, encode_vector

logger = logging.getLogger(__name__)

TABLE_SEPARATOR = "."
PAGE_SEPARATOR = "!"
PAGE_ID_LENGTH = 8


def encode_page(page_id: str, entry: PageEntry) -> str:
    return page_id + TABLE_SEPARATOR.join(encode_vector(vector) for vector in entry)


def decode_page(record: str) -> tuple[str, PageEntry]:
    page_id = record[:PAGE_ID_LENGTH]
    vectors = record[PAGE_ID_LENGTH:].split(TABLE_SEPARATOR)
    return page_id, [decode_vector(chunk) for chunk in vectors]


def encode_blob(pages: Mapping[str, PageEntry]) -> Blob:
    """Group page records by the first character of their id.

    Records sharing a shard are joined with ``!`` in the mapping's order.
    """
    shards: dict[str, list[str]] = {}
    for page_id, entry in pages.items():
        shards.setdefault(shard_key(page_id), []).append(encode_page(page_id, entry))
    return {key: PAGE_SEPARATOR.join(records) for key, records in shards.items()}


def decode_blob(blob: Mapping[str, Any]) -> dict[str, PageEntry]:
    """Inverse of :func:`encode_blob`.

    Decoding is best effort: ragged records produce short or misaligned
    vectors rather than errors. The shard key itself is not checked against
    the ids it holds.
    """
    pages: dict[str, PageEntry] = {}
    for key, value in blob.items():
        if not isinstance(value, str):
            logger.debug("skipping non-string shard %r", key)
            continue
        for record in value.split(PAGE_SEPARATOR):
            if not record:
                continue
            page_id, entry = decode_page(record)
            pages[page_id] = entry
    return pages
