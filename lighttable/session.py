from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Sequence

from .hashing import hash_page_name
from .kv import storage_available
from .store import HighlightStore
from .types import PageEntry, TableLayout

logger = logging.getLogger(__name__)


class AutosortPendingError(RuntimeError):
    """Raised when a session is opened before autosorted tables settle."""


class HighlightSession:
    """Highlight state for the tables of one page.

    The caller owns the session and passes it wherever marks change; nothing
    about the current page is kept at module level.
    """

    def __init__(
        self,
        store: HighlightStore,
        page_id: str,
        tables: Sequence[TableLayout],
        entry: PageEntry,
    ):
        self.store = store
        self.page_id = page_id
        self.tables = list(tables)
        self.entry = entry

    @classmethod
    def open(
        cls,
        store: HighlightStore,
        page_name: str,
        tables: Sequence[TableLayout],
        *,
        sorted: bool = False,
    ) -> HighlightSession | None:
        """Load stored marks for a page's tables.

        Returns None when there is nothing to track or the store cannot be
        written. Tables flagged ``autosort`` are reordered after render, so
        callers must pass ``sorted=True`` once that has happened.
        """
        if not tables:
            logger.info("no tables found")
            return None
        if not storage_available(store.kv):
            logger.info("no storage found")
            return None
        if not sorted and any(table.autosort for table in tables):
            raise AutosortPendingError("autosort tables must be sorted before loading")

        page_id = hash_page_name(page_name)
        session = cls(store, page_id, tables, store.load(page_id, len(tables)))
        session._init_tables()
        return session

    def _init_tables(self) -> None:
        self._warn_duplicate_row_ids()
        pending: list[str] = []
        for index, table in enumerate(self.tables):
            vector = self.entry[index]
            while len(vector) < table.cell_count:
                vector.append(0)
            if not table.table_id:
                continue
            named = self.store.load_named(table.table_id)
            if named is None:
                if table.table_id not in pending:
                    pending.append(table.table_id)
                continue
            for cell, row_id in enumerate(table.row_ids[: table.cell_count]):
                if row_id and row_id in named and cell not in table.blocked:
                    vector[cell] = named[row_id]
        # Named groups with no stored data yet are seeded from page marks.
        for table_id in pending:
            self._save_named(table_id)

    def _warn_duplicate_row_ids(self) -> None:
        counts = Counter(
            row_id for table in self.tables if table.table_id for row_id in table.row_ids if row_id
        )
        for row_id, count in counts.items():
            if count > 1:
                logger.warning("reused row id in named table: %s (%d cells)", row_id, count)

    def _table(self, table_index: int) -> TableLayout:
        if not 0 <= table_index < len(self.tables):
            raise IndexError(f"table index out of range: {table_index}")
        return self.tables[table_index]

    def marks(self, table_index: int) -> list[int]:
        table = self._table(table_index)
        return self.entry[table_index][: table.cell_count]

    def toggle(self, table_index: int, cell_index: int) -> int:
        table = self._table(table_index)
        if not 0 <= cell_index < table.cell_count:
            raise IndexError(f"cell index out of range: {cell_index}")
        vector = self.entry[table_index]
        if cell_index in table.blocked:
            return vector[cell_index]
        vector[cell_index] = 1 - vector[cell_index]
        self._persist(table)
        return vector[cell_index]

    def clear(self, table_index: int) -> None:
        table = self._table(table_index)
        vector = self.entry[table_index]
        for cell in range(table.cell_count):
            vector[cell] = 0
        self._persist(table)

    def _persist(self, table: TableLayout) -> None:
        if table.table_id:
            self._save_named(table.table_id)
        else:
            self.store.save(self.page_id, self.entry)

    def _save_named(self, table_id: str) -> None:
        items: dict[str, int] = {}
        for index, table in enumerate(self.tables):
            if table.table_id != table_id:
                continue
            vector = self.entry[index]
            for cell, row_id in enumerate(table.row_ids[: table.cell_count]):
                if row_id:
                    items[row_id] = vector[cell]
        self.store.save_named(table_id, items)
