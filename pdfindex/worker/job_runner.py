from pdfindex.config.settings import Settings
from pdfindex.database.models import JobRecord
from pdfindex.database.repositories.document_repository import DocumentRepository
from pdfindex.database.repositories.job_repository import JobRepository
from pdfindex.logging.logger import Log
from pdfindex.processor.models import JobStatus
from pdfindex.processor.processor import Processor, truncate_error


class JobRunner:
    """Run one job, record its outcome, and apply retry logic."""

    def __init__(
        self,
        processor: Processor,
        job_repo: JobRepository,
        doc_repo: DocumentRepository,
        settings: Settings,
    ) -> None:
        self._processor = processor
        self._job_repo = job_repo
        self._doc_repo = doc_repo
        self._settings = settings

    def run(self, job: JobRecord) -> None:
        """Execute a single job with error handling.

        Document-level failures are already recorded on the document by
        the processor and finish the job as failed. Exceptions escaping the
        processor (e.g. the database went away) are retried. A job
        reclaimed after its worker died with no attempts left fails
        without running.
        """
        if job.attempts >= self._settings.max_job_attempts:
            self._abandon(job)
            return

        Log.info(f"Running job {job.id} for asset {job.asset_id} (attempt {job.attempts + 1})")
        try:
            status = self._processor.process(job.asset_id)
        except Exception as exc:
            self._handle_failure(job, exc)
            return

        if status is JobStatus.SUCCESS:
            self._job_repo.mark_done(job.id)
            Log.info(f"Job {job.id} completed successfully")
        elif status is JobStatus.SKIPPED:
            self._job_repo.mark_skipped(job.id)
            Log.info(f"Job {job.id} skipped")
        else:
            self._job_repo.mark_failed(job.id, f"Processing of asset {job.asset_id} failed")
            Log.warning(f"Job {job.id} finished with a failed document")

    def _handle_failure(self, job: JobRecord, exc: Exception) -> None:
        """Increment attempts; at max, fail both the job and its document."""
        Log.error(f"Job {job.id} failed: {exc}", exc_info=True)
        if job.attempts + 1 >= self._settings.max_job_attempts:
            self._job_repo.mark_failed(job.id, str(exc))
            self._doc_repo.mark_failed(job.asset_id, truncate_error(exc))
            Log.error(f"Job {job.id} permanently failed after {job.attempts + 1} attempts")
        else:
            self._job_repo.increment_attempts(job.id)
            Log.warning(f"Job {job.id} will be retried (attempt {job.attempts + 1})")

    def _abandon(self, job: JobRecord) -> None:
        """Fail a reclaimed job whose earlier runs never finished."""
        error = f"Abandoned after {job.attempts} interrupted attempts"
        self._job_repo.mark_failed(job.id, error)
        self._doc_repo.mark_failed(job.asset_id, error)
        Log.error(f"Job {job.id} for asset {job.asset_id}: {error}")
