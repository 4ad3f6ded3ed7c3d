import httpx

from intake.config.settings import Settings
from intake.database.connection import init_pool
from intake.database.repositories.job_repository import JobRepository
from intake.submission.base import BaseJobClient
from intake.submission.http_client import HttpJobClient
from intake.submission.postgres_client import PostgresJobClient


class JobClientFactory:
    """Creates the job service client named by settings.job_backend."""

    BACKENDS = ("http", "postgres")

    @classmethod
    async def create(cls, settings: Settings) -> BaseJobClient:
        backend = settings.job_backend.lower()
        if backend == "http":
            return HttpJobClient(
                httpx.AsyncClient(
                    base_url=settings.api_base_url,
                    timeout=settings.api_timeout_seconds,
                )
            )
        if backend == "postgres":
            await init_pool(settings)
            return PostgresJobClient(JobRepository())
        raise ValueError(
            f"Unknown job backend '{backend}'. Choose from: {list(cls.BACKENDS)}"
        )
