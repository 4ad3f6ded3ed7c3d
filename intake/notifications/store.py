import asyncio
import itertools
import threading
from collections.abc import AsyncIterator
from dataclasses import dataclass, replace

from intake.logging.logger import Log
from intake.notifications.exceptions import NotificationNotFound
from intake.notifications.models import Notification, NotificationKind


@dataclass(eq=False)
class _Subscriber:
    """A subscription queue and the event loop that owns it."""

    loop: asyncio.AbstractEventLoop
    queue: asyncio.Queue[list[Notification] | None]

    def put_latest(self, item: list[Notification] | None) -> None:
        """Keep only the latest item; must run on the owning loop."""
        while not self.queue.empty():
            self.queue.get_nowait()
        self.queue.put_nowait(item)


class NotificationStore:
    """Most-recent-first notification feed plus the job-completion ledger.

    A job id is in the ledger exactly when a job_complete notification for it
    is in the feed; the check-and-set in notify_job_complete runs under one
    lock so concurrent callers cannot both win. Subscribers are woken on
    their own event loop, so any thread may add notifications.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._feed: list[Notification] = []
        self._notified_jobs: set[int] = set()
        self._ids = itertools.count(1)
        self._subscribers: list[_Subscriber] = []
        self._closed = False

    @property
    def unread_count(self) -> int:
        with self._lock:
            return sum(1 for notification in self._feed if not notification.read)

    @property
    def notified_jobs(self) -> frozenset[int]:
        with self._lock:
            return frozenset(self._notified_jobs)

    def snapshot(self) -> list[Notification]:
        """Copies of the feed, newest first."""
        with self._lock:
            return [replace(notification) for notification in self._feed]

    def notify_job_complete(
        self,
        job_id: int,
        title: str,
        message: str,
    ) -> Notification | None:
        """Record a job completion once; repeats return None and change nothing."""
        with self._lock:
            if job_id in self._notified_jobs:
                return None
            notification = Notification(
                id=next(self._ids),
                title=title,
                message=message,
                kind=NotificationKind.JOB_COMPLETE,
                job_id=job_id,
            )
            self._notified_jobs.add(job_id)
            self._feed.insert(0, notification)

        Log.info("Job completion notified", job_id=job_id, notification=notification.id)
        self._publish()
        return replace(notification)

    def add_notification(
        self,
        kind: NotificationKind,
        title: str,
        message: str,
        job_id: int | None = None,
    ) -> Notification:
        """Add a status_change or system notification."""
        if kind == NotificationKind.JOB_COMPLETE:
            raise ValueError("Job completions must go through notify_job_complete")
        with self._lock:
            notification = Notification(
                id=next(self._ids),
                title=title,
                message=message,
                kind=kind,
                job_id=job_id,
            )
            self._feed.insert(0, notification)

        self._publish()
        return replace(notification)

    def mark_as_read(self, notification_id: int) -> None:
        with self._lock:
            for notification in self._feed:
                if notification.id == notification_id:
                    already_read = notification.read
                    notification.read = True
                    break
            else:
                raise NotificationNotFound(f"Notification {notification_id} not found")
        if not already_read:
            self._publish()

    def mark_all_as_read(self) -> None:
        with self._lock:
            changed = any(not notification.read for notification in self._feed)
            for notification in self._feed:
                notification.read = True
        if changed:
            self._publish()

    def clear(self) -> None:
        """Full session reset: empties the feed and the ledger."""
        with self._lock:
            self._feed.clear()
            self._notified_jobs.clear()
        Log.info("Notification store reset")
        self._publish()

    async def subscribe(self) -> AsyncIterator[list[Notification]]:
        """Yield the current feed, then a fresh snapshot after every change.

        Each call starts an independent sequence. Slow consumers skip straight
        to the latest snapshot. The sequence ends when the store is closed.
        """
        subscriber = _Subscriber(asyncio.get_running_loop(), asyncio.Queue(maxsize=1))
        self._subscribers.append(subscriber)
        try:
            yield self.snapshot()
            if self._closed:
                return
            while True:
                snapshot = await subscriber.queue.get()
                if snapshot is None:
                    return
                yield snapshot
        finally:
            self._subscribers.remove(subscriber)

    def close(self) -> None:
        """End all active subscriptions."""
        self._closed = True
        self._offer(None)

    def _publish(self) -> None:
        if self._subscribers and not self._closed:
            self._offer(self.snapshot())

    def _offer(self, item: list[Notification] | None) -> None:
        try:
            current_loop: asyncio.AbstractEventLoop | None = asyncio.get_running_loop()
        except RuntimeError:
            current_loop = None
        for subscriber in list(self._subscribers):
            if subscriber.loop is current_loop:
                subscriber.put_latest(item)
            elif not subscriber.loop.is_closed():
                subscriber.loop.call_soon_threadsafe(subscriber.put_latest, item)
