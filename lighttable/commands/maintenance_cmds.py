from __future__ import annotations

import json

from rich import print


def _format_bytes(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / 1024 / 1024:.1f} MB"


def dump_cmd(*, store_from_path, db_path: str | None) -> None:
    """Print the stored shard mapping as JSON."""

    store = store_from_path(db_path)
    try:
        blob = store.read_blob()
    finally:
        store.close()
    print(json.dumps(blob, indent=2, sort_keys=True))


def stats_cmd(*, store_from_path, db_path: str | None) -> None:
    store = store_from_path(db_path)
    try:
        stats_data = store.stats()
    finally:
        store.close()

    print("[bold]Highlights[/bold]")
    print(f"- Storage key: {stats_data['storage_key']}")
    print(f"- Shards: {stats_data['shards']}")
    print(f"- Pages: {stats_data['pages']}")
    print(f"- Tables: {stats_data['groups']}")
    print(f"- Blob size: {_format_bytes(stats_data['blob_bytes'])}")
    print(f"- Named groups: {stats_data['named_groups']}")
