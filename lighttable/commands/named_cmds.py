from __future__ import annotations

import typer
from rich import print

from .common import parse_mark


def named_show_cmd(*, store_from_path, db_path: str | None, group_id: str) -> None:
    store = store_from_path(db_path)
    try:
        items = store.load_named(group_id)
    finally:
        store.close()

    if items is None:
        print(f"[yellow]No stored data for {group_id}[/yellow]")
        return
    print(f"[bold]{group_id}[/bold]")
    for item_id, mark in sorted(items.items()):
        print(f"- {item_id}: {mark}")


def named_set_cmd(
    *, store_from_path, db_path: str | None, group_id: str, assignments: list[str]
) -> None:
    items: dict[str, int] = {}
    for assignment in assignments:
        item_id, sep, value = assignment.rpartition("=")
        try:
            if not sep or not item_id:
                raise ValueError(f"expected ITEM=MARK, got {assignment!r}")
            items[item_id] = parse_mark(value.strip().lower())
        except ValueError as exc:
            print(f"[red]{exc}[/red]")
            raise typer.Exit(code=1) from exc

    store = store_from_path(db_path)
    try:
        store.save_named(group_id, items)
    finally:
        store.close()
    print(f"Saved {len(items)} item(s) to {group_id}")
