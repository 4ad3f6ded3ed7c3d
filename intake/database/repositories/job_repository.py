from collections.abc import Collection

from psycopg.rows import dict_row

from intake.database.connection import get_connection
from intake.database.models import TranslationRequestRecord
from intake.workflow.models import TranslationRequest


class JobRepository:
    """Database operations for the translation_requests table."""

    async def create_request(self, request: TranslationRequest, total_cost: str) -> int:
        """Insert a calculated request as a pending job and return its id."""
        analysis = request.analysis
        async with get_connection() as conn:
            async with conn.cursor() as cur:
                await cur.execute(
                    """
                    INSERT INTO translation_requests
                    (project_name, file_name, file_format, file_size, word_count,
                     char_count, images_with_text, subject_matter, source_language,
                     target_languages, credits_required, total_cost, status)
                    VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, 'pending')
                    RETURNING id
                    """,
                    (
                        request.project_name,
                        analysis.file_name,
                        analysis.file_format.value,
                        analysis.file_size_bytes,
                        analysis.word_count,
                        analysis.char_count,
                        analysis.images_with_text,
                        analysis.subject_matter,
                        analysis.source_language,
                        sorted(request.target_languages),
                        request.credits_required,
                        total_cost,
                    ),
                )
                row = await cur.fetchone()
            await conn.commit()

        if row is None:
            raise RuntimeError("INSERT into translation_requests returned no id")
        return int(row[0])

    async def find_statuses(self, job_ids: Collection[int]) -> dict[int, str]:
        """Return the stored status for each id that exists. Missing ids are omitted."""
        if not job_ids:
            return {}
        async with get_connection() as conn:
            async with conn.cursor() as cur:
                await cur.execute(
                    "SELECT id, status FROM translation_requests WHERE id = ANY(%s)",
                    (list(job_ids),),
                )
                rows = await cur.fetchall()
        return {int(row[0]): str(row[1]) for row in rows}

    async def find_by_id(self, job_id: int) -> TranslationRequestRecord | None:
        """Find a request by ID. Useful for tests."""
        async with get_connection() as conn:
            async with conn.cursor(row_factory=dict_row) as cur:
                await cur.execute(
                    """
                    SELECT id, file_name, status, project_name, created_at
                    FROM translation_requests
                    WHERE id = %s
                    """,
                    (job_id,),
                )
                row = await cur.fetchone()

        if row is None:
            return None

        return TranslationRequestRecord(
            id=row["id"],
            file_name=row["file_name"],
            status=row["status"],
            project_name=row["project_name"],
            created_at=row["created_at"],
        )

    async def mark_complete(self, job_id: int) -> None:
        """Mark a job as complete. Used by operators and integration tests."""
        async with get_connection() as conn:
            await conn.execute(
                """
                UPDATE translation_requests
                SET status = 'complete', updated_at = NOW()
                WHERE id = %s
                """,
                (job_id,),
            )
            await conn.commit()
