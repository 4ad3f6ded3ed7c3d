import asyncio
from dataclasses import dataclass

from intake.logging.logger import Log
from intake.notifications.models import Notification
from intake.notifications.store import NotificationStore
from intake.submission.base import BaseJobClient, JobStatus


@dataclass(frozen=True)
class TrackedJob:
    job_id: int
    label: str


class CompletionPoller:
    """Reconcile loop: sleep -> fetch statuses -> notify newly completed jobs.

    Ticks are serialized, so a job can never be seen complete by two
    reconciliations at once.
    """

    NOTIFICATION_TITLE = "Job Completed"

    def __init__(
        self,
        job_client: BaseJobClient,
        store: NotificationStore,
        interval_seconds: float,
    ) -> None:
        self._job_client = job_client
        self._store = store
        self._interval_seconds = interval_seconds
        self._pending: dict[int, TrackedJob] = {}
        self._tick_lock = asyncio.Lock()
        self._stop_event = asyncio.Event()
        self._task: asyncio.Task[None] | None = None

    @property
    def interval_seconds(self) -> float:
        return self._interval_seconds

    @property
    def pending_jobs(self) -> frozenset[int]:
        return frozenset(self._pending)

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def register(self, job_id: int, label: str) -> None:
        """Start tracking a submitted job until it is reported complete."""
        if job_id in self._store.notified_jobs:
            Log.debug("Job already notified, not tracking", job_id=job_id)
            return
        self._pending[job_id] = TrackedJob(job_id=job_id, label=label)
        Log.info("Tracking job for completion", job_id=job_id)

    async def tick(self) -> list[Notification]:
        """Run one reconciliation and return the notifications it created.

        Status source failures count as "no new information": nothing is
        raised and no job changes state.
        """
        async with self._tick_lock:
            if not self._pending:
                return []
            tracked = dict(self._pending)

            try:
                statuses = await self._job_client.get_job_statuses(set(tracked))
            except Exception as exc:
                Log.warning("Status check failed, will retry next tick", error=exc)
                return []
            if not isinstance(statuses, dict):
                Log.warning("Status check returned malformed data, will retry next tick")
                return []

            created: list[Notification] = []
            for job_id, job in tracked.items():
                if statuses.get(job_id) != JobStatus.COMPLETE:
                    continue
                self._pending.pop(job_id, None)
                notification = self._store.notify_job_complete(
                    job_id,
                    self.NOTIFICATION_TITLE,
                    f'Translation job "{job.label}" has been completed',
                )
                if notification is not None:
                    created.append(notification)

            Log.debug(
                "Reconciliation tick finished",
                completed=len(created),
                still_pending=len(self._pending),
            )
            return created

    async def run(self, max_ticks: int | None = None) -> None:
        """Poll until stop() is called.

        If max_ticks is set, stop after that many ticks (for testing).
        """
        Log.info("Completion poller started", interval=self._interval_seconds)
        ticks = 0
        while not self._stop_event.is_set():
            await self.tick()
            ticks += 1
            if max_ticks is not None and ticks >= max_ticks:
                break
            try:
                await asyncio.wait_for(
                    self._stop_event.wait(), timeout=self._interval_seconds
                )
            except asyncio.TimeoutError:
                pass
        Log.info("Completion poller stopped")

    def start(self) -> None:
        """Run the loop as a background task on the current event loop."""
        if self.is_running:
            return
        self._stop_event.clear()
        self._task = asyncio.create_task(self.run())

    async def stop(self) -> None:
        """Stop the loop and wait for an in-flight tick to finish."""
        self._stop_event.set()
        if self._task is not None:
            await self._task
            self._task = None
