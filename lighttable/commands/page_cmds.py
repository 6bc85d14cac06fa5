from __future__ import annotations

import typer
from rich import print

from lighttable.hashing import hash_page_name, shard_key

from .common import format_marks, group_count


def hash_cmd(*, page: str) -> None:
    page_id = hash_page_name(page)
    print(f"{page_id} (shard {shard_key(page_id)})")


def show_cmd(
    *,
    store_from_path,
    db_path: str | None,
    page_id: str,
    tables: int | None,
    default_tables: int,
) -> None:
    store = store_from_path(db_path)
    try:
        entry = store.load(page_id, group_count(store, page_id, tables, minimum=default_tables))
    finally:
        store.close()

    print(f"[bold]{page_id}[/bold]")
    if not entry:
        print("- No tables")
        return
    for index, vector in enumerate(entry):
        print(f"- table {index}: {format_marks(vector)} ({sum(vector)} marked)")


def _check_table(table: int, tables: int | None) -> None:
    if table < 0 or (tables is not None and table >= tables):
        limit = "" if tables is None else f" for {tables} table(s)"
        print(f"[red]Table {table} out of range{limit}[/red]")
        raise typer.Exit(code=1)


def toggle_cmd(
    *,
    store_from_path,
    db_path: str | None,
    page_id: str,
    tables: int | None,
    table: int,
    cell: int,
) -> None:
    _check_table(table, tables)
    if cell < 0:
        print("[red]Cell index must not be negative[/red]")
        raise typer.Exit(code=1)
    store = store_from_path(db_path)
    try:
        entry = store.load(page_id, group_count(store, page_id, tables, minimum=table + 1))
        vector = entry[table]
        while len(vector) <= cell:
            vector.append(0)
        vector[cell] = 1 - vector[cell]
        store.save(page_id, entry)
    finally:
        store.close()

    state = "on" if vector[cell] else "off"
    print(f"{page_id} table {table} cell {cell}: {state}")


def clear_cmd(
    *, store_from_path, db_path: str | None, page_id: str, tables: int | None, table: int
) -> None:
    _check_table(table, tables)
    store = store_from_path(db_path)
    try:
        entry = store.load(page_id, group_count(store, page_id, tables, minimum=table + 1))
        entry[table] = [0] * len(entry[table])
        store.save(page_id, entry)
    finally:
        store.close()
    print(f"Cleared table {table} on {page_id}")


def forget_cmd(*, store_from_path, db_path: str | None, page_id: str) -> None:
    store = store_from_path(db_path)
    try:
        removed = store.forget(page_id)
    finally:
        store.close()
    if removed:
        print(f"Forgot {page_id}")
    else:
        print(f"[yellow]No stored data for {page_id}[/yellow]")
