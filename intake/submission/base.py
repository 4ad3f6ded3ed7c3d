from abc import ABC, abstractmethod
from collections.abc import Collection
from enum import Enum

from intake.workflow.models import TranslationRequest


class JobStatus(str, Enum):
    """Job states the intake engine distinguishes."""

    PENDING = "pending"
    COMPLETE = "complete"

    @classmethod
    def from_raw(cls, raw: str) -> "JobStatus":
        """Anything other than 'complete' is still in progress."""
        return cls.COMPLETE if raw.strip().lower() == cls.COMPLETE.value else cls.PENDING


class BaseJobClient(ABC):
    """Contract for the external job service."""

    @abstractmethod
    async def create_translation_job(
        self,
        request: TranslationRequest,
        total_cost: str,
    ) -> int:
        """Persist a calculated request as a job.

        Args:
            request: Request in the Calculated state.
            total_cost: Display form of the cost, e.g. "£200.00".

        Returns:
            The new job id.

        Raises:
            RejectedByServer: on validation or conflict errors.
            JobServiceUnavailable: if the service cannot be reached.
        """

    @abstractmethod
    async def get_job_statuses(self, job_ids: Collection[int]) -> dict[int, JobStatus]:
        """Return statuses for the ids the service knows about.

        Ids the service does not report are simply absent from the mapping.
        """

    async def aclose(self) -> None:
        """Release any held resources. Default: nothing to release."""
