"""Snapshot persistence for the market stores.

Each store serialises its whole collection under one key. Rows carry a
schema version; anything missing, from another version, corrupt, or
unreadable falls back to the store's seed data. Save failures are raised
as ``PersistenceError`` so the caller sees an operational error instead of
silently losing state.
"""

from typing import Callable, Optional, Protocol, TypeVar

from libs.common.logging import get_logger
from pydantic import BaseModel, TypeAdapter, ValidationError
from services.market_service.errors import PersistenceError
from services.market_service.models import StateSnapshot
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

logger = get_logger(__name__)

SNAPSHOT_SCHEMA_VERSION = 1

T = TypeVar("T", bound=BaseModel)


class SnapshotStore(Protocol):
    async def load(self, key: str) -> Optional[StateSnapshot]: ...

    async def save(self, key: str, payload: list) -> None: ...


class SqlSnapshotStore:
    """SnapshotStore backed by the ``market_state_snapshots`` table."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        schema_version: int = SNAPSHOT_SCHEMA_VERSION,
    ):
        self._session_factory = session_factory
        self.schema_version = schema_version

    async def load(self, key: str) -> Optional[StateSnapshot]:
        async with self._session_factory() as session:
            return await session.get(StateSnapshot, key)

    async def save(self, key: str, payload: list) -> None:
        try:
            async with self._session_factory() as session:
                row = await session.get(StateSnapshot, key)
                if row is None:
                    session.add(
                        StateSnapshot(
                            key=key,
                            schema_version=self.schema_version,
                            payload=payload,
                        )
                    )
                else:
                    row.schema_version = self.schema_version
                    row.payload = payload
                await session.commit()
        except SQLAlchemyError as e:
            logger.exception("Failed to save snapshot %s", key)
            raise PersistenceError(key) from e


class Snapshotter:
    """Typed load/save of one collection of records under one key."""

    def __init__(self, store: Optional[SnapshotStore], key: str, model: type[T]):
        self._store = store
        self.key = key
        self._adapter = TypeAdapter(list[model])

    async def load(self, seed: Callable[[], list[T]]) -> list[T]:
        if self._store is None:
            return seed()

        try:
            row = await self._store.load(self.key)
        except SQLAlchemyError:
            logger.exception("Could not read snapshot %s, using seed data", self.key)
            return seed()

        if row is None:
            logger.info("No snapshot for %s, using seed data", self.key)
            return seed()
        if row.schema_version != SNAPSHOT_SCHEMA_VERSION:
            logger.warning(
                "Snapshot %s has schema v%s (expected v%s), using seed data",
                self.key,
                row.schema_version,
                SNAPSHOT_SCHEMA_VERSION,
            )
            return seed()
        try:
            return self._adapter.validate_python(row.payload)
        except ValidationError:
            logger.warning("Snapshot %s is corrupt, using seed data", self.key)
            return seed()

    async def save(self, records: list[T]) -> None:
        if self._store is None:
            return
        payload = self._adapter.dump_python(records, mode="json")
        await self._store.save(self.key, payload)
