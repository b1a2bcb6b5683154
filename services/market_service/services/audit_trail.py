"""Append-only audit trail of mutating actions."""

from typing import Optional

from libs.common.logging import get_logger
from services.market_service.models import (
    Account,
    AuditAction,
    AuditLogEntry,
    new_id,
)
from services.market_service.services.persistence import Snapshotter, SnapshotStore

logger = get_logger(__name__)

SYSTEM_ACTOR_ID = "system"
SYSTEM_ACTOR_NAME = "System"


class AuditTrail:
    def __init__(self, store: Optional[SnapshotStore] = None):
        self._snapshots = Snapshotter(store, "audit_log", AuditLogEntry)
        self._entries: list[AuditLogEntry] = []

    async def load(self) -> None:
        self._entries = await self._snapshots.load(list)

    async def record(
        self,
        actor: Optional[Account],
        action: AuditAction | str,
        details: str,
    ) -> AuditLogEntry:
        """Append an entry attributed to ``actor`` (or the system)."""
        entry = AuditLogEntry(
            id=new_id("log"),
            actor_id=actor.id if actor else SYSTEM_ACTOR_ID,
            actor_name=actor.full_name if actor else SYSTEM_ACTOR_NAME,
            action=action.value if isinstance(action, AuditAction) else action,
            details=details,
        )
        self._entries.insert(0, entry)
        await self._snapshots.save(self._entries)
        logger.info("audit %s by %s: %s", entry.action, entry.actor_id, details)
        return entry

    def entries(self, limit: Optional[int] = None) -> list[AuditLogEntry]:
        """Newest first."""
        if limit is None:
            return list(self._entries)
        return self._entries[:limit]
