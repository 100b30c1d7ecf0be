from __future__ import annotations

from datetime import UTC, datetime

import sqlalchemy as sa
from sqlmodel import Field, SQLModel


def _now_utc() -> datetime:
    return datetime.now(UTC)


class StorageEntry(SQLModel, table=True):
    """One value in the durable key-value store.

    The request store keeps its whole collection as a JSON array in a single row.
    """

    __tablename__ = "storage_entry"

    key: str = Field(primary_key=True, max_length=255)
    value: str = Field(sa_type=sa.Text)  # ty: ignore[invalid-argument-type]
    updated_at: datetime = Field(
        default_factory=_now_utc,
        sa_type=sa.DateTime(timezone=True),  # ty: ignore[invalid-argument-type]
        sa_column_kwargs={"server_default": sa.func.now(), "onupdate": sa.func.now()},
    )
