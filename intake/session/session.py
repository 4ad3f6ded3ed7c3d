from collections.abc import AsyncIterator, Iterable
from types import TracebackType

from intake.analysis.base import BaseDocumentAnalyzer
from intake.analysis.factory import DocumentAnalyzerFactory
from intake.analysis.models import UploadedFile
from intake.config.settings import Settings
from intake.logging.logger import Log
from intake.notifications.models import Notification
from intake.notifications.store import NotificationStore
from intake.pricing.calculator import CalculationSummary, CostCalculator
from intake.session.exceptions import SessionClosed
from intake.submission.base import BaseJobClient
from intake.submission.factory import JobClientFactory
from intake.submission.gateway import SubmissionGateway
from intake.worker.poller import CompletionPoller
from intake.workflow.state_machine import TranslationWorkflow


class IntakeSession:
    """Everything one user session needs, behind the operations the UI calls.

    Workflow handles are the TranslationWorkflow objects returned by
    start_workflow.
    """

    def __init__(
        self,
        analyzer: BaseDocumentAnalyzer,
        calculator: CostCalculator,
        job_client: BaseJobClient,
        store: NotificationStore,
        poller: CompletionPoller,
    ) -> None:
        self._analyzer = analyzer
        self._calculator = calculator
        self._job_client = job_client
        self._store = store
        self._poller = poller
        self._gateway = SubmissionGateway(job_client, poller)
        self._closed = False

    @property
    def unread_count(self) -> int:
        return self._store.unread_count

    @property
    def notifications(self) -> list[Notification]:
        return self._store.snapshot()

    @property
    def poller(self) -> CompletionPoller:
        return self._poller

    async def start_workflow(
        self,
        upload: UploadedFile,
        project_name: str | None = None,
    ) -> TranslationWorkflow:
        """Analyze an upload and return a workflow in the Analyzed state."""
        self._ensure_open()
        workflow = TranslationWorkflow(project_name=project_name)
        analysis = await self._analyzer.analyze(upload)
        if self._closed:
            Log.info("Session closed during analysis, result discarded", file=upload.file_name)
            raise SessionClosed("Session closed before analysis finished")
        workflow.attach_analysis(analysis)
        return workflow

    def select_languages(self, handle: TranslationWorkflow, languages: Iterable[str]) -> None:
        self._ensure_open()
        handle.select_languages(languages)

    def complete_selection(self, handle: TranslationWorkflow) -> CalculationSummary:
        self._ensure_open()
        return handle.complete_selection(self._calculator)

    def edit_selection(self, handle: TranslationWorkflow) -> None:
        self._ensure_open()
        handle.edit_selection()

    async def submit_request(self, handle: TranslationWorkflow) -> int:
        self._ensure_open()
        job_id = await self._gateway.submit(handle)
        if self._closed:
            Log.info("Session closed during submission, job not tracked", job_id=job_id)
            raise SessionClosed(f"Session closed before job {job_id} could be tracked")
        if not self._poller.is_running:
            self._poller.start()
        return job_id

    def subscribe_notifications(self) -> AsyncIterator[list[Notification]]:
        return self._store.subscribe()

    def mark_notification_read(self, notification_id: int) -> None:
        self._store.mark_as_read(notification_id)

    def mark_all_notifications_read(self) -> None:
        self._store.mark_all_as_read()

    def clear_notifications(self) -> None:
        self._store.clear()

    async def close(self) -> None:
        """Stop polling, end subscriptions and release external clients."""
        if self._closed:
            return
        self._closed = True
        await self._poller.stop()
        self._store.close()
        await self._analyzer.aclose()
        await self._job_client.aclose()
        Log.info("Intake session closed")

    async def __aenter__(self) -> "IntakeSession":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    def _ensure_open(self) -> None:
        if self._closed:
            raise SessionClosed("Session is closed")


async def build_session(settings: Settings) -> IntakeSession:
    """Build an IntakeSession with the adapters named in settings."""
    analyzer = DocumentAnalyzerFactory.create(settings)
    job_client = await JobClientFactory.create(settings)
    store = NotificationStore()
    poller = CompletionPoller(job_client, store, settings.poll_interval_seconds)
    calculator = CostCalculator(settings.credit_unit_price, settings.currency_symbol)
    return IntakeSession(
        analyzer=analyzer,
        calculator=calculator,
        job_client=job_client,
        store=store,
        poller=poller,
    )
