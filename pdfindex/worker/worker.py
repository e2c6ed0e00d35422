import time

from pdfindex.config.settings import Settings
from pdfindex.database.connection import get_connection
from pdfindex.database.models import JobRecord
from pdfindex.database.repositories.job_repository import JobRepository
from pdfindex.logging.logger import Log
from pdfindex.worker.job_runner import JobRunner


class Worker:
    """Poll loop over pdf_jobs: claim -> process -> sleep when idle.

    Several workers may poll the same table; ``claim_next_job`` locks with
    SKIP LOCKED so each job is handed to exactly one of them.
    """

    def __init__(
        self,
        job_repo: JobRepository,
        job_runner: JobRunner,
        settings: Settings,
    ) -> None:
        self._job_repo = job_repo
        self._job_runner = job_runner
        self._settings = settings

    def run(self, max_jobs: int | None = None) -> int:
        """Process jobs until interrupted.

        If max_jobs is set, stop after processing that many jobs. Returns
        the number of jobs processed.
        """
        Log.info(
            f"Worker started, polling every {self._settings.job_poll_interval_seconds}s"
        )
        jobs_done = 0
        try:
            while max_jobs is None or jobs_done < max_jobs:
                if self.run_once():
                    jobs_done += 1
                else:
                    time.sleep(self._settings.job_poll_interval_seconds)
        except KeyboardInterrupt:
            Log.info("Worker shutting down gracefully")
        Log.info(f"Worker stopped after {jobs_done} jobs")
        return jobs_done

    def run_once(self) -> bool:
        """Claim and run at most one job. Returns True if a job ran."""
        job = self._try_claim_job()
        if job is None:
            Log.debug("No PDF jobs available")
            return False
        self._job_runner.run(job)
        return True

    def _try_claim_job(self) -> JobRecord | None:
        """Attempt to claim the next pending job. Database errors mean no job."""
        try:
            with get_connection() as conn:
                return self._job_repo.claim_next_job(conn)
        except Exception as exc:
            Log.warning(f"Database error while claiming a job, will retry: {exc}")
            return None
