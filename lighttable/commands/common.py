from __future__ import annotations

from typing import Any

import typer
from rich import print

from lighttable.config import load_config, read_config_file, write_config_file
from lighttable.hashing import hash_page_name, is_page_id
from lighttable.kv import SqliteKeyValueStore
from lighttable.store import HighlightStore


def store_from_path(db_path: str | None) -> HighlightStore:
    cfg = load_config()
    kv = SqliteKeyValueStore(db_path or cfg.db_path)
    return HighlightStore(kv, storage_key=cfg.storage_key)


def resolve_tables(tables: int | None) -> int | None:
    if tables is not None and tables < 0:
        print("[red]--tables must not be negative[/red]")
        raise typer.Exit(code=1)
    return tables


def group_count(store: HighlightStore, page_id: str, tables: int | None, *, minimum: int) -> int:
    """Use --tables when given; otherwise never drop groups that are already stored."""
    if tables is not None:
        return tables
    stored = store.read_pages().get(page_id, [])
    return max(len(stored), minimum)


def resolve_page_id(page: str, *, raw_id: bool) -> str:
    if not raw_id:
        return hash_page_name(page)
    page_id = page.upper()
    if not is_page_id(page_id):
        print(f"[red]Not a page identifier: {page!r}[/red]")
        raise typer.Exit(code=1)
    return page_id


def parse_mark(value: str) -> int:
    if value in {"1", "true", "on"}:
        return 1
    if value in {"0", "false", "off"}:
        return 0
    raise ValueError(f"invalid mark: {value!r}")


def format_marks(marks: list[int]) -> str:
    return "".join(str(mark) for mark in marks) or "-"


def read_config_or_exit() -> dict[str, Any]:
    try:
        return read_config_file()
    except ValueError as exc:
        print(f"[red]Invalid config file: {exc}[/red]")
        raise typer.Exit(code=1) from exc


def write_config_or_exit(data: dict[str, Any]) -> None:
    try:
        write_config_file(data)
    except OSError as exc:
        print(f"[red]Failed to write config: {exc}[/red]")
        raise typer.Exit(code=1) from exc
