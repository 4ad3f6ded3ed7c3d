from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class NotificationKind(str, Enum):
    JOB_COMPLETE = "job_complete"
    STATUS_CHANGE = "status_change"
    SYSTEM = "system"


@dataclass
class Notification:
    """One feed entry. Only `read` changes after creation."""

    id: int
    title: str
    message: str
    kind: NotificationKind
    job_id: int | None = None
    read: bool = False
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
