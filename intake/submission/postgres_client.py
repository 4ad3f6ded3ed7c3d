from collections.abc import Collection

import psycopg

from intake.database.connection import close_pool
from intake.database.repositories.job_repository import JobRepository
from intake.submission.base import BaseJobClient, JobStatus
from intake.submission.exceptions import JobServiceUnavailable, RejectedByServer
from intake.workflow.models import TranslationRequest


class PostgresJobClient(BaseJobClient):
    """Job service backed directly by the translation_requests table."""

    def __init__(self, job_repo: JobRepository) -> None:
        self._job_repo = job_repo

    async def create_translation_job(
        self,
        request: TranslationRequest,
        total_cost: str,
    ) -> int:
        try:
            return await self._job_repo.create_request(request, total_cost)
        except (psycopg.IntegrityError, psycopg.DataError) as exc:
            raise RejectedByServer(str(exc).strip()) from exc
        except psycopg.OperationalError as exc:
            raise JobServiceUnavailable(f"Database unavailable: {exc}") from exc

    async def get_job_statuses(self, job_ids: Collection[int]) -> dict[int, JobStatus]:
        rows = await self._job_repo.find_statuses(job_ids)
        return {job_id: JobStatus.from_raw(status) for job_id, status in rows.items()}

    async def aclose(self) -> None:
        await close_pool()
