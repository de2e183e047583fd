"""
Lookup service

Reads a submission back by application number: the main row (ratio table
first, then kg/m3) plus its admixture and SCM rows.
"""

import re
from typing import Any, Dict, List, Optional, Sequence, Tuple

from mixintake.config.constants import KGM3_SHEET_ALIASES, InputMode
from mixintake.core.config import Settings, get_settings
from mixintake.core.errors import IntakeError, RecordNotFoundError, StorageFailureError
from mixintake.core.logging import get_logger
from mixintake.services.row_store import RowStore, RowStoreError
from mixintake.services.sheet_schema import parse_child_rows, parse_main_row, record_id_of

logger = get_logger(__name__)


def normalize_table_name(name: str) -> str:
    """
    Case, whitespace and slash insensitive form of a table name.

    >>> normalize_table_name(" Client  Master Sheet - kg/m3")
    'client master sheet - kgm3'
    """
    return re.sub(r"\s+", " ", str(name).lower()).replace("/", "").strip()


def resolve_table_name(existing: Sequence[str], candidates: Sequence[str]) -> str:
    """
    First candidate present in ``existing``, exactly or after normalizing.

    Falls back to the first candidate, which reads as an empty table.
    """
    for candidate in candidates:
        if candidate in existing:
            return candidate

    by_normal_form = {normalize_table_name(name): name for name in existing}
    for candidate in candidates:
        hit = by_normal_form.get(normalize_table_name(candidate))
        if hit:
            return hit
    return candidates[0]


class LookupService:
    def __init__(self, store: RowStore, settings: Optional[Settings] = None):
        self.store = store
        self.settings = settings or get_settings()

    async def _search_order(self) -> List[Tuple[InputMode, str]]:
        try:
            existing = await self.store.list_tables()
        except RowStoreError as exc:
            raise StorageFailureError("Failed to list tables") from exc

        kgm3_candidates = [self.settings.sheet_kgm3]
        kgm3_candidates += [name for name in KGM3_SHEET_ALIASES if name not in kgm3_candidates]
        return [
            (InputMode.RATIO, resolve_table_name(existing, [self.settings.sheet_ratio])),
            (InputMode.KGM3, resolve_table_name(existing, kgm3_candidates)),
        ]

    async def _read(self, table: str) -> List[List[Any]]:
        try:
            return await self.store.read_rows(table)
        except RowStoreError as exc:
            raise StorageFailureError(f"Failed to read {table}") from exc

    @staticmethod
    def _matching(rows: Sequence[Sequence[Any]], record_id: str) -> List[Sequence[Any]]:
        return [row for row in rows if record_id_of(row) == record_id]

    async def lookup(self, record_id: Optional[str]) -> Dict[str, Any]:
        """
        Return the normalized record for ``record_id``.

        Raises:
            IntakeError: blank application number (400)
            RecordNotFoundError: no main row carries it
            StorageFailureError: a table could not be read
        """
        record_id = (record_id or "").strip()
        if not record_id:
            raise IntakeError("E_MISSING_FIELD", "Missing appNo", 400)

        data = None
        for mode, table in await self._search_order():
            matches = self._matching(await self._read(table), record_id)
            if matches:
                data = parse_main_row(mode, matches[0])
                break

        if data is None:
            logger.info("Application number not found", record_id=record_id)
            raise RecordNotFoundError(record_id)

        admixture_rows = self._matching(await self._read(self.settings.sheet_admixtures), record_id)
        scm_rows = self._matching(await self._read(self.settings.sheet_scms), record_id)

        data["admixtures"] = parse_child_rows(admixture_rows, "dosage")
        data["scms"] = parse_child_rows(scm_rows, "percent")
        return data
