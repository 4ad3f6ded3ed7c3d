import asyncio

from intake.logging.logger import Log
from intake.submission.base import BaseJobClient
from intake.worker.poller import CompletionPoller
from intake.workflow.exceptions import NotCalculated
from intake.workflow.models import WorkflowStatus
from intake.workflow.state_machine import TranslationWorkflow


class SubmissionGateway:
    """The only path from a Calculated workflow to a persisted job."""

    def __init__(self, job_client: BaseJobClient, poller: CompletionPoller) -> None:
        self._job_client = job_client
        self._poller = poller
        self._lock = asyncio.Lock()

    async def submit(self, workflow: TranslationWorkflow) -> int:
        """Persist the request, mark it Submitted and start tracking the job.

        The workflow is frozen while the job service call is outstanding, so
        a created job is always marked Submitted and tracked.

        Raises:
            NotCalculated: if the workflow is not Calculated. The job service
                is not contacted.
            RejectedByServer: if the job service refuses the request; the
                workflow stays Calculated.
            JobServiceUnavailable: if the job service is unreachable; the
                workflow stays Calculated.
        """
        async with self._lock:
            request = workflow.request
            summary = workflow.summary
            if workflow.status != WorkflowStatus.CALCULATED or request is None or summary is None:
                raise NotCalculated(workflow.status)

            Log.info(
                "Submitting translation request",
                workflow=workflow.handle_id,
                credits=summary.credits_required,
            )
            workflow.begin_submission()
            try:
                job_id = await self._job_client.create_translation_job(
                    request, summary.formatted_cost
                )
            except BaseException:
                workflow.abort_submission()
                raise
            workflow.mark_submitted(job_id)
            self._poller.register(job_id, request.label)
            Log.info("Translation request submitted", job_id=job_id)
            return job_id
