from collections.abc import Collection

import httpx

from intake.logging.logger import Log
from intake.submission.base import BaseJobClient, JobStatus
from intake.submission.exceptions import JobServiceUnavailable, RejectedByServer
from intake.workflow.models import TranslationRequest


class HttpJobClient(BaseJobClient):
    """Job service client for the translation-requests REST API."""

    REQUESTS_PATH = "/api/translation-requests"
    REJECTION_CODES = frozenset({400, 409, 422})

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def create_translation_job(
        self,
        request: TranslationRequest,
        total_cost: str,
    ) -> int:
        analysis = request.analysis
        body = {
            "projectName": request.project_name,
            "fileName": analysis.file_name,
            "fileFormat": analysis.file_format.value,
            "fileSize": analysis.file_size_bytes,
            "wordCount": analysis.word_count,
            "characterCount": analysis.char_count,
            "imagesWithText": analysis.images_with_text,
            "subjectMatter": analysis.subject_matter,
            "sourceLanguage": analysis.source_language,
            "targetLanguages": sorted(request.target_languages),
            "creditsRequired": request.credits_required,
            "totalCost": total_cost,
        }
        try:
            response = await self._client.post(self.REQUESTS_PATH, json=body)
        except httpx.HTTPError as exc:
            raise JobServiceUnavailable(f"Job service unreachable: {exc}") from exc

        if response.status_code in self.REJECTION_CODES:
            raise RejectedByServer(self._reason(response))
        if response.is_error:
            raise JobServiceUnavailable(
                f"Job service returned {response.status_code}"
            )

        try:
            job_id = int(response.json()["id"])
        except (ValueError, KeyError, TypeError) as exc:
            raise JobServiceUnavailable(f"Malformed job service response: {exc}") from exc
        Log.debug("Job service accepted request", job_id=job_id)
        return job_id

    async def get_job_statuses(self, job_ids: Collection[int]) -> dict[int, JobStatus]:
        if not job_ids:
            return {}
        wanted = set(job_ids)
        response = await self._client.get(self.REQUESTS_PATH)
        response.raise_for_status()
        payload = response.json()
        if not isinstance(payload, list):
            raise ValueError("Job list response must be an array")

        statuses: dict[int, JobStatus] = {}
        for job in payload:
            if not isinstance(job, dict):
                continue
            try:
                job_id = int(job["id"])
            except (KeyError, TypeError, ValueError):
                Log.debug("Skipping job row without a usable id", row=job)
                continue
            if job_id in wanted:
                statuses[job_id] = JobStatus.from_raw(str(job.get("status", "")))
        return statuses

    @staticmethod
    def _reason(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text or f"HTTP {response.status_code}"
        if isinstance(body, dict):
            return str(body.get("error") or body.get("message") or body)
        return str(body)

    async def aclose(self) -> None:
        await self._client.aclose()
