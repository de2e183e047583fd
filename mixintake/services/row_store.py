"""
Row store

Spreadsheet-like storage: named tables of ordered rows, each row an
ordered list of scalar cells. Supports appending rows and reading a
column range. Every call is atomic on its own; nothing spans calls.
"""

from abc import ABC, abstractmethod
from typing import Any, List, Optional, Sequence

from sqlalchemy import distinct, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from mixintake.core.logging import get_logger
from mixintake.models.sheet_row import SheetRow

logger = get_logger(__name__)

Row = List[Any]


class RowStoreError(Exception):
    """Read or append against the row store failed."""

    def __init__(self, table: str, operation: str, message: str):
        self.table = table
        self.operation = operation
        self.message = message
        super().__init__(f"{operation} on '{table}' failed: {message}")


class DuplicateKeyError(RowStoreError):
    """An append carried a unique key already present in the table."""

    def __init__(self, table: str, key: str, scope: Optional[str] = None):
        self.key = key
        self.scope = scope or table
        super().__init__(table, "append", f"key {key!r} already exists")


class RowStore(ABC):
    """Interface the submission and lookup services depend on."""

    @abstractmethod
    async def read_rows(self, table: str, start_column: int = 0, end_column: Optional[int] = None) -> List[Row]:
        """Rows of ``table`` in append order, sliced to [start_column, end_column)."""

    @abstractmethod
    async def append_rows(
        self,
        table: str,
        rows: Sequence[Sequence[Any]],
        unique_key: Optional[str] = None,
        key_scope: Optional[str] = None,
    ) -> int:
        """
        Append ``rows`` after the existing content, all or nothing.

        When ``unique_key`` is given it is attached to the first row and
        the append fails with DuplicateKeyError if ``key_scope`` already
        holds that key. The scope defaults to ``table``; tables sharing a
        scope share one key space. Returns the number of rows written.
        """

    @abstractmethod
    async def list_tables(self) -> List[str]:
        """Names of the tables holding at least one row."""

    async def read_column(self, table: str, column: int) -> List[Any]:
        """One cell per row, None where the row is shorter than ``column``."""
        rows = await self.read_rows(table, column, column + 1)
        return [row[0] if row else None for row in rows]

    async def ping(self) -> bool:
        return True


class SqlRowStore(RowStore):
    """Row store over the ``sheet_rows`` table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def read_rows(self, table: str, start_column: int = 0, end_column: Optional[int] = None) -> List[Row]:
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(SheetRow.cells)
                    .where(SheetRow.sheet_name == table)
                    .order_by(SheetRow.id)
                )
                cells = result.scalars().all()
        except SQLAlchemyError as exc:
            logger.error("Row store read failed", table=table, error=str(exc), exc_info=True)
            raise RowStoreError(table, "read", str(exc)) from exc

        return [list(row or [])[start_column:end_column] for row in cells]

    async def append_rows(
        self,
        table: str,
        rows: Sequence[Sequence[Any]],
        unique_key: Optional[str] = None,
        key_scope: Optional[str] = None,
    ) -> int:
        if not rows:
            return 0

        scope = (key_scope or table) if unique_key is not None else None
        objects = [
            SheetRow(
                sheet_name=table,
                key_scope=scope if index == 0 else None,
                unique_key=unique_key if index == 0 else None,
                cells=list(row),
            )
            for index, row in enumerate(rows)
        ]

        try:
            async with self._session_factory() as session:
                async with session.begin():
                    session.add_all(objects)
        except IntegrityError as exc:
            if unique_key is not None:
                raise DuplicateKeyError(table, unique_key, scope) from exc
            logger.error("Row store append failed", table=table, error=str(exc), exc_info=True)
            raise RowStoreError(table, "append", str(exc)) from exc
        except SQLAlchemyError as exc:
            logger.error("Row store append failed", table=table, error=str(exc), exc_info=True)
            raise RowStoreError(table, "append", str(exc)) from exc

        logger.debug("Rows appended", table=table, count=len(objects))
        return len(objects)

    async def list_tables(self) -> List[str]:
        try:
            async with self._session_factory() as session:
                result = await session.execute(select(distinct(SheetRow.sheet_name)))
                return list(result.scalars().all())
        except SQLAlchemyError as exc:
            logger.error("Row store table listing failed", error=str(exc), exc_info=True)
            raise RowStoreError("*", "list", str(exc)) from exc

    async def ping(self) -> bool:
        try:
            async with self._session_factory() as session:
                await session.execute(select(1))
            return True
        except SQLAlchemyError:
            return False
