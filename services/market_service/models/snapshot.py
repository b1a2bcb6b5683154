"""Durable snapshot table backing the in-memory market stores."""

from datetime import datetime

from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from sqlalchemy import JSON, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column


class StateSnapshot(Base):
    """One row per store collection (``products``, ``accounts``, ...)."""

    __tablename__ = "market_state_snapshots"

    key: Mapped[str] = mapped_column(String(64), primary_key=True)
    schema_version: Mapped[int] = mapped_column(Integer, nullable=False)
    payload: Mapped[list] = mapped_column(JSON, nullable=False)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    def __repr__(self):
        return f"<StateSnapshot {self.key} v{self.schema_version}>"
