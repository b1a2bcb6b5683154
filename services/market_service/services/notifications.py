"""Notification sink for user-facing success/failure messages.

The stores report every validation failure and every success here. The
center logs each message and keeps a short buffer of recent ones; an
entry is considered displayed (and drops out of ``active()``) after the
configured TTL, mirroring the auto-dismiss of the storefront toast.
"""

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional, Protocol

from libs.common.datetime_utils import utc_now
from libs.common.logging import get_logger
from libs.common.messages import t
from services.market_service.errors import MarketError
from services.market_service.models import NotificationSeverity

logger = get_logger(__name__)


class NotificationSink(Protocol):
    def notify(self, message: str, severity: NotificationSeverity) -> None: ...


@dataclass(frozen=True)
class Notification:
    message: str
    severity: NotificationSeverity
    created_at: datetime = field(default_factory=utc_now)


class NotificationCenter:
    """Default sink: log plus bounded in-memory buffer."""

    def __init__(self, ttl_seconds: int = 3, buffer_size: int = 50):
        self._ttl = timedelta(seconds=ttl_seconds)
        self._recent: deque[Notification] = deque(maxlen=buffer_size)

    def notify(self, message: str, severity: NotificationSeverity) -> None:
        self._recent.append(Notification(message=message, severity=severity))
        if severity == NotificationSeverity.ERROR:
            logger.warning("notify[error]: %s", message)
        else:
            logger.info("notify[success]: %s", message)

    def recent(self) -> list[Notification]:
        return list(self._recent)

    def active(self, now: Optional[datetime] = None) -> list[Notification]:
        now = now or utc_now()
        return [n for n in self._recent if now - n.created_at < self._ttl]


class Notifier:
    """Thin helper the stores use to talk to a sink via message keys."""

    def __init__(self, sink: NotificationSink):
        self.sink = sink

    def success(self, key: str, **params) -> None:
        self.sink.notify(t(key, **params), NotificationSeverity.SUCCESS)

    def reject(self, error: MarketError) -> MarketError:
        """Report ``error`` and hand it back so callers can ``raise`` it."""
        self.sink.notify(error.message, NotificationSeverity.ERROR)
        return error
