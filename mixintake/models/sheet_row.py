"""
Sheet row model

One row of a spreadsheet-like table. Cells are stored as an ordered JSON
list, rows are ordered by their autoincrement id (append order).
"""

from datetime import datetime
from typing import Any, List, Optional

from sqlalchemy import JSON, DateTime, Index, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from mixintake.core.database import Base


class SheetRow(Base):
    __tablename__ = "sheet_rows"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
        comment="Append order"
    )

    sheet_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="Table (tab) name"
    )

    # Set for main rows only (the application number). NULLs never collide,
    # so child rows sharing a record id are unaffected.
    key_scope: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
        comment="Namespace of unique_key, the sheet name unless shared"
    )

    unique_key: Mapped[Optional[str]] = mapped_column(
        String(64),
        nullable=True,
        comment="Key that may appear at most once per scope"
    )

    cells: Mapped[List[Any]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        comment="Ordered cell values"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint("key_scope", "unique_key", name="uq_sheet_rows_scope_key"),
        Index("ix_sheet_rows_sheet_id", "sheet_name", "id"),
    )

    def __repr__(self) -> str:
        return f"<SheetRow(id={self.id}, sheet='{self.sheet_name}', key={self.unique_key!r})>"
