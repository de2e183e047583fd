"""
Counter over the application number column of the main tables.

``read_last`` finds the bottom-most non-empty cell of column A and
``propose_next`` hands it to the allocator. When the allocator draws both
modes from one sequence the counter spans both main tables and the latest
number of either one wins.

The pair is not atomic: two submissions can read the same last value. The
submission service closes that gap by appending with the proposed number
as a unique key and retrying on conflict.
"""

from typing import Any, Iterable, List, Optional, Sequence, Union

from mixintake.config.constants import RECORD_ID_COLUMN, InputMode
from mixintake.services.record_id_allocator import RecordIdAllocator
from mixintake.services.row_store import RowStore


def last_non_empty(cells: Iterable[Any]) -> Optional[str]:
    """Trimmed text of the last non-blank cell, or None."""
    last = None
    for cell in cells:
        if cell is None:
            continue
        text = str(cell).strip()
        if text:
            last = text
    return last


class RecordCounter:
    def __init__(
        self,
        store: RowStore,
        tables: Union[str, Sequence[str]],
        allocator: RecordIdAllocator,
        mode: InputMode,
    ):
        self.store = store
        self.tables: List[str] = [tables] if isinstance(tables, str) else list(tables)
        self.allocator = allocator
        self.mode = mode

    async def read_last(self) -> Optional[str]:
        candidates = []
        for table in self.tables:
            cells = await self.store.read_column(table, RECORD_ID_COLUMN)
            last = last_non_empty(cells)
            if last is not None:
                candidates.append(last)

        if len(candidates) <= 1:
            return candidates[0] if candidates else None

        # Malformed values only count when nothing parses
        latest, latest_position = candidates[0], None
        for value in candidates:
            position = self.allocator.position(value, self.mode)
            if position is not None and (latest_position is None or position > latest_position):
                latest, latest_position = value, position
        return latest

    def propose_next(self, last_id: Optional[str]) -> str:
        return self.allocator.next(last_id, self.mode)
