from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ._store import HighlightStore

logger = logging.getLogger(__name__)

NAMED_KEY_SEPARATOR = ":"


def named_key(store: HighlightStore, group_id: str) -> str:
    return f"{store.storage_key}{NAMED_KEY_SEPARATOR}{group_id}"


def coerce_mark(value: object) -> int:
    """Read a stored mark the way the browser gadget does, so ``"0"`` is off."""
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0
        try:
            value = float(text)
        except ValueError:
            return 0
    if isinstance(value, (bool, int, float)):
        # NaN never counts as marked.
        return 1 if value and value == value else 0
    return 0


def load_named(store: HighlightStore, group_id: str) -> dict[str, int] | None:
    """Return stored marks for a named group, or None when nothing is stored.

    An empty dict means the group was saved with no items, which is not the
    same as never having been saved.
    """
    data = store._read_json(named_key(store, group_id))
    if data is None:
        return None
    if not isinstance(data, dict):
        logger.warning("ignoring non-object named group %s", group_id)
        return None
    return {str(item_id): coerce_mark(mark) for item_id, mark in data.items()}


def save_named(store: HighlightStore, group_id: str, items: Mapping[str, int]) -> None:
    # Items missing from `items` keep their stored marks.
    data = load_named(store, group_id) or {}
    for item_id, mark in items.items():
        if not item_id:
            continue
        data[item_id] = coerce_mark(mark)
    store._write_json(named_key(store, group_id), data)


def named_groups(store: HighlightStore) -> list[str]:
    prefix = f"{store.storage_key}{NAMED_KEY_SEPARATOR}"
    return [key[len(prefix) :] for key in store.kv.keys(prefix)]
