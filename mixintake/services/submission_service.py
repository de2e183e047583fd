"""
Submission service

Turns a validated submission into stored rows:

1. parse and validate the payload (client errors stop here, no I/O)
2. read the last application number (the mode's main table, or both main
   tables when the numbering scheme does not tell the modes apart)
3. allocate the next number and derive w/c ratio + mix ratio string
4. append the main row, keyed by the application number across both
   main tables
5. append one row per admixture and per SCM

Each append is atomic on its own. A child append failing after the main
row was stored does not remove the main row; the caller gets a
PartialSubmissionError carrying the application number.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, List, Optional, Tuple

from mixintake.config.constants import MAIN_KEY_SCOPE, InputMode
from mixintake.core.config import Settings, get_settings
from mixintake.core.errors import (
    PartialSubmissionError,
    RecordIdConflictError,
    RecordIdSequenceExhaustedError,
    StorageFailureError,
)
from mixintake.core.logging import get_logger
from mixintake.schemas.submission import Submission, parse_submission
from mixintake.services.mix_derivation import DerivedMixValues
from mixintake.services.record_counter import RecordCounter
from mixintake.services.record_id_allocator import RecordIdAllocator, build_allocator
from mixintake.services.row_store import DuplicateKeyError, RowStore, RowStoreError
from mixintake.services.sheet_schema import build_child_rows, build_main_row

logger = get_logger(__name__)


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """ISO-8601 UTC with milliseconds, e.g. 2025-01-31T09:15:02.123Z"""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class SubmissionResult:
    record_id: str
    timestamp: str
    mode: InputMode
    derived: DerivedMixValues
    admixture_rows: int = 0
    scm_rows: int = 0


class SubmissionService:
    def __init__(
        self,
        store: RowStore,
        settings: Optional[Settings] = None,
        allocator: Optional[RecordIdAllocator] = None,
        clock: Callable[[], str] = utc_timestamp,
    ):
        self.store = store
        self.settings = settings or get_settings()
        self.allocator = allocator or build_allocator(self.settings)
        self.clock = clock

    def main_table(self, mode: InputMode) -> str:
        if mode is InputMode.KGM3:
            return self.settings.sheet_kgm3
        return self.settings.sheet_ratio

    def counter_tables(self, mode: InputMode) -> List[str]:
        """Main tables the next number of ``mode`` continues from."""
        if self.allocator.shares_sequence:
            return [self.settings.sheet_kgm3, self.settings.sheet_ratio]
        return [self.main_table(mode)]

    async def submit(self, payload: Any) -> SubmissionResult:
        submission = parse_submission(payload)
        mode = submission.input_mode

        derived = submission.derive(include_water_term=self.settings.mix_include_water_term)
        record_id, timestamp = await self._append_main_row(submission, derived)

        admixture_rows = await self._append_child_rows(
            record_id, timestamp, submission, self.settings.sheet_admixtures, "admixtures", "dosage"
        )
        scm_rows = await self._append_child_rows(
            record_id, timestamp, submission, self.settings.sheet_scms, "scms", "percent"
        )

        logger.info(
            "Submission saved",
            record_id=record_id,
            mode=mode.value,
            admixtures=admixture_rows,
            scms=scm_rows,
        )
        return SubmissionResult(
            record_id=record_id,
            timestamp=timestamp,
            mode=mode,
            derived=derived,
            admixture_rows=admixture_rows,
            scm_rows=scm_rows,
        )

    async def _append_main_row(self, submission: Submission, derived: DerivedMixValues) -> Tuple[str, str]:
        mode = submission.input_mode
        table = self.main_table(mode)
        counter = RecordCounter(self.store, self.counter_tables(mode), self.allocator, mode)
        values = submission.cell_values()
        max_attempts = self.settings.record_id_max_attempts
        wrapped = False

        for attempt in range(1, max_attempts + 1):
            try:
                last_id = await counter.read_last()
            except RowStoreError as exc:
                logger.error("Failed to read last application number", table=table, error=str(exc))
                raise StorageFailureError("Failed to read existing records") from exc

            record_id = counter.propose_next(last_id)
            timestamp = self.clock()
            row = build_main_row(mode, values, record_id, timestamp, derived)

            try:
                await self.store.append_rows(table, [row], unique_key=record_id, key_scope=MAIN_KEY_SCOPE)
            except DuplicateKeyError:
                wrapped = self.allocator.wraps(last_id, mode)
                if wrapped:
                    # first number of the previous cycle is still stored
                    logger.error(
                        "Application number sequence exhausted",
                        last_id=last_id,
                        record_id=record_id,
                        table=table,
                        scheme=self.allocator.scheme,
                        attempt=attempt,
                    )
                    continue
                logger.warning(
                    "Application number already taken, retrying",
                    record_id=record_id,
                    table=table,
                    attempt=attempt,
                )
                continue
            except RowStoreError as exc:
                logger.error("Failed to append main row", record_id=record_id, table=table, error=str(exc))
                raise StorageFailureError("Failed to save main record") from exc

            logger.info("Main row appended", record_id=record_id, table=table, last_id=last_id)
            return record_id, timestamp

        if wrapped:
            raise RecordIdSequenceExhaustedError(max_attempts)
        raise RecordIdConflictError(max_attempts)

    async def _append_child_rows(
        self,
        record_id: str,
        timestamp: str,
        submission: Submission,
        table: str,
        field: str,
        value_key: str,
    ) -> int:
        entries: List[dict] = [entry.model_dump() for entry in getattr(submission, field)]
        if not entries:
            return 0

        rows = build_child_rows(record_id, timestamp, submission.client_name, entries, value_key)
        try:
            return await self.store.append_rows(table, rows)
        except RowStoreError as exc:
            logger.error(
                "Child rows not saved after main row",
                record_id=record_id,
                table=table,
                error=str(exc),
            )
            raise PartialSubmissionError(
                record_id,
                table,
                f"Failed to save {field}; record {record_id} was saved without them",
            ) from exc
