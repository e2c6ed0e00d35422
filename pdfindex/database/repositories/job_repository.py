from typing import Any

import psycopg
from psycopg.rows import dict_row

from pdfindex.database.connection import get_connection
from pdfindex.database.models import JobRecord

_JOB_COLUMNS = (
    "id, asset_id, status, attempts, error_message, locked_at, created_at, updated_at"
)


class JobRepository:
    """Queue of PDF processing jobs backed by the pdf_jobs table.

    Status flow: pending -> processing -> done | skipped | failed. A job
    that raised is returned to pending with one more attempt until
    *max_attempts* is reached. A job left in processing for longer than
    *stale_after_seconds* belonged to a worker that died mid-run; it is
    claimed again and the lost run counts as an attempt.
    """

    def __init__(self, max_attempts: int, stale_after_seconds: int = 3600) -> None:
        self._max_attempts = max_attempts
        self._stale_after_seconds = stale_after_seconds

    def claim_next_job(self, conn: psycopg.Connection[Any]) -> JobRecord | None:
        """Atomically move the oldest claimable job to processing.

        Uses FOR UPDATE SKIP LOCKED so concurrent workers never claim the
        same row.
        """
        with conn.cursor(row_factory=dict_row) as cur:
            cur.execute(
                f"""
                UPDATE pdf_jobs
                SET status = 'processing', locked_at = NOW(), updated_at = NOW(),
                    attempts = attempts + CASE WHEN status = 'processing' THEN 1 ELSE 0 END
                WHERE id = (
                    SELECT id
                    FROM pdf_jobs
                    WHERE (status = 'pending' AND attempts < %s)
                       OR (status = 'processing'
                           AND locked_at < NOW() - %s * INTERVAL '1 second')
                    ORDER BY created_at, id
                    LIMIT 1
                    FOR UPDATE SKIP LOCKED
                )
                RETURNING {_JOB_COLUMNS}
                """,
                (self._max_attempts, self._stale_after_seconds),
            )
            row = cur.fetchone()
        conn.commit()
        return _to_job(row) if row is not None else None

    def mark_done(self, job_id: int) -> None:
        self._finish(job_id, "done")

    def mark_skipped(self, job_id: int) -> None:
        """Asset was missing, deleted or not a PDF."""
        self._finish(job_id, "skipped")

    def mark_failed(self, job_id: int, error: str) -> None:
        self._finish(job_id, "failed", error)

    def increment_attempts(self, job_id: int) -> None:
        """Increment attempt count and return job to pending."""
        with get_connection() as conn:
            conn.execute(
                """
                UPDATE pdf_jobs
                SET attempts = attempts + 1, status = 'pending',
                    locked_at = NULL, updated_at = NOW()
                WHERE id = %s
                """,
                (job_id,),
            )
            conn.commit()

    def _finish(self, job_id: int, status: str, error: str | None = None) -> None:
        with get_connection() as conn:
            conn.execute(
                """
                UPDATE pdf_jobs
                SET status = %s, error_message = %s, locked_at = NULL, updated_at = NOW()
                WHERE id = %s
                """,
                (status, error, job_id),
            )
            conn.commit()


def _to_job(row: dict[str, Any]) -> JobRecord:
    return JobRecord(
        id=row["id"],
        asset_id=str(row["asset_id"]),
        status=row["status"],
        attempts=row["attempts"],
        error_message=row["error_message"],
        locked_at=row["locked_at"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )
