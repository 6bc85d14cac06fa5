from __future__ import annotations

import logging
from typing import List, Optional

import typer
from rich import print

from .commands.common import (
    read_config_or_exit,
    resolve_page_id,
    resolve_tables,
    store_from_path,
    write_config_or_exit,
)
from .commands.maintenance_cmds import dump_cmd, stats_cmd
from .commands.named_cmds import named_set_cmd, named_show_cmd
from .commands.page_cmds import clear_cmd, forget_cmd, hash_cmd, show_cmd, toggle_cmd
from .config import (
    CONFIG_ENV_OVERRIDES,
    LOG_LEVELS,
    get_config_path,
    get_env_overrides,
    load_config,
)

app = typer.Typer(help="lighttable: compact storage for table highlights")
named_app = typer.Typer(help="Named highlight groups shared across pages")
config_app = typer.Typer(help="Show or edit configuration")
app.add_typer(named_app, name="named")
app.add_typer(config_app, name="config")


@app.callback()
def _configure_logging() -> None:
    logging.basicConfig(level=load_config().log_level)


@app.command("hash")
def hash_page(page: str = typer.Argument(..., help="Page name")) -> None:
    """Print the page identifier for a page name."""

    hash_cmd(page=page)


@app.command()
def show(
    page: str = typer.Argument(..., help="Page name or identifier"),
    tables: Optional[int] = typer.Option(None, help="Number of tables on the page"),
    raw_id: bool = typer.Option(False, "--raw-id", help="PAGE is already an identifier"),
    db_path: str = typer.Option(None, help="Path to SQLite database"),
) -> None:
    """Show stored marks for a page."""

    show_cmd(
        store_from_path=store_from_path,
        db_path=db_path,
        page_id=resolve_page_id(page, raw_id=raw_id),
        tables=resolve_tables(tables),
        default_tables=load_config().default_tables,
    )


@app.command()
def toggle(
    page: str = typer.Argument(..., help="Page name or identifier"),
    table: int = typer.Argument(..., help="Table index, in document order"),
    cell: int = typer.Argument(..., help="Row or cell index within the table"),
    tables: Optional[int] = typer.Option(None, help="Number of tables on the page"),
    raw_id: bool = typer.Option(False, "--raw-id", help="PAGE is already an identifier"),
    db_path: str = typer.Option(None, help="Path to SQLite database"),
) -> None:
    """Flip one mark and save."""

    toggle_cmd(
        store_from_path=store_from_path,
        db_path=db_path,
        page_id=resolve_page_id(page, raw_id=raw_id),
        tables=resolve_tables(tables),
        table=table,
        cell=cell,
    )


@app.command()
def clear(
    page: str = typer.Argument(..., help="Page name or identifier"),
    table: int = typer.Argument(..., help="Table index, in document order"),
    tables: Optional[int] = typer.Option(None, help="Number of tables on the page"),
    raw_id: bool = typer.Option(False, "--raw-id", help="PAGE is already an identifier"),
    db_path: str = typer.Option(None, help="Path to SQLite database"),
) -> None:
    """Remove all marks from one table."""

    clear_cmd(
        store_from_path=store_from_path,
        db_path=db_path,
        page_id=resolve_page_id(page, raw_id=raw_id),
        tables=resolve_tables(tables),
        table=table,
    )


@app.command()
def forget(
    page: str = typer.Argument(..., help="Page name or identifier"),
    raw_id: bool = typer.Option(False, "--raw-id", help="PAGE is already an identifier"),
    db_path: str = typer.Option(None, help="Path to SQLite database"),
) -> None:
    """Drop everything stored for a page."""

    forget_cmd(
        store_from_path=store_from_path,
        db_path=db_path,
        page_id=resolve_page_id(page, raw_id=raw_id),
    )


@app.command()
def dump(db_path: str = typer.Option(None, help="Path to SQLite database")) -> None:
    """Print the raw sharded blob."""

    dump_cmd(store_from_path=store_from_path, db_path=db_path)


@app.command()
def stats(db_path: str = typer.Option(None, help="Path to SQLite database")) -> None:
    """Show shard, page and size counts."""

    stats_cmd(store_from_path=store_from_path, db_path=db_path)


@named_app.command("show")
def named_show(
    group_id: str = typer.Argument(..., help="Named group id"),
    db_path: str = typer.Option(None, help="Path to SQLite database"),
) -> None:
    """Show stored marks for a named group."""

    named_show_cmd(store_from_path=store_from_path, db_path=db_path, group_id=group_id)


@named_app.command("set")
def named_set(
    group_id: str = typer.Argument(..., help="Named group id"),
    assignments: List[str] = typer.Argument(..., help="ITEM=MARK pairs, MARK is 0 or 1"),
    db_path: str = typer.Option(None, help="Path to SQLite database"),
) -> None:
    """Merge marks into a named group."""

    named_set_cmd(
        store_from_path=store_from_path,
        db_path=db_path,
        group_id=group_id,
        assignments=assignments,
    )


@config_app.command("show")
def config_show() -> None:
    """Show the effective configuration."""

    cfg = load_config()
    print(f"[bold]Config file[/bold]: {get_config_path()}")
    for key, value in cfg.to_dict().items():
        print(f"- {key}: {value}")
    overrides = get_env_overrides()
    if overrides:
        print("\n[bold]Env overrides[/bold]")
        for key, value in overrides.items():
            print(f"- {CONFIG_ENV_OVERRIDES[key]}={value}")


@config_app.command("set")
def config_set(
    key: str = typer.Argument(..., help="Config key"),
    value: str = typer.Argument(..., help="New value"),
) -> None:
    """Write one key to the config file."""

    if key not in CONFIG_ENV_OVERRIDES:
        print(f"[red]Unknown config key: {key}[/red]")
        raise typer.Exit(code=1)
    if key == "default_tables" and not value.strip().isdigit():
        print("[red]default_tables must be a non-negative integer[/red]")
        raise typer.Exit(code=1)
    if key == "log_level" and value.strip().upper() not in LOG_LEVELS:
        print(f"[red]log_level must be one of: {', '.join(LOG_LEVELS)}[/red]")
        raise typer.Exit(code=1)
    data = read_config_or_exit()
    data[key] = value
    write_config_or_exit(data)
    print(f"Set {key} in {get_config_path()}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
