from unittest.mock import MagicMock, patch

from pdfindex.database.models import JobRecord
from pdfindex.worker.worker import Worker


def _make_worker() -> tuple[Worker, MagicMock, MagicMock]:
    """Create a Worker with mocked dependencies."""
    mock_repo = MagicMock()
    mock_runner = MagicMock()
    settings = MagicMock(job_poll_interval_seconds=1)
    worker = Worker(mock_repo, mock_runner, settings)
    return worker, mock_repo, mock_runner


def _make_job(job_id: int = 1) -> JobRecord:
    return JobRecord(id=job_id, asset_id=f"asset-{job_id}", status="processing", attempts=0)


class TestWorkerDispatch:
    def test_dispatches_job_to_runner(self) -> None:
        worker, _repo, mock_runner = _make_worker()
        job = _make_job()

        with patch.object(worker, "_try_claim_job", side_effect=[job, KeyboardInterrupt]):
            worker.run()

        mock_runner.run.assert_called_once_with(job)

    def test_stops_after_max_jobs(self) -> None:
        worker, _repo, mock_runner = _make_worker()

        with patch.object(
            worker, "_try_claim_job", side_effect=[_make_job(1), _make_job(2), _make_job(3)]
        ):
            done = worker.run(max_jobs=2)

        assert done == 2
        assert mock_runner.run.call_count == 2

    def test_run_once_without_job(self) -> None:
        worker, _repo, mock_runner = _make_worker()

        with patch.object(worker, "_try_claim_job", return_value=None):
            assert worker.run_once() is False

        mock_runner.run.assert_not_called()


class TestWorkerSleep:
    def test_sleeps_when_no_job(self) -> None:
        worker, _repo, _runner = _make_worker()

        with (
            patch.object(worker, "_try_claim_job", side_effect=[None, KeyboardInterrupt]),
            patch("pdfindex.worker.worker.time.sleep") as mock_sleep,
        ):
            worker.run()

        mock_sleep.assert_called_once_with(1)


class TestWorkerClaim:
    @patch("pdfindex.worker.worker.get_connection")
    def test_database_error_means_no_job(self, mock_get_conn: MagicMock) -> None:
        worker, _repo, _runner = _make_worker()
        mock_get_conn.side_effect = RuntimeError("Connection pool not initialized")

        assert worker._try_claim_job() is None

    @patch("pdfindex.worker.worker.get_connection")
    def test_claims_with_pooled_connection(self, mock_get_conn: MagicMock) -> None:
        worker, mock_repo, _runner = _make_worker()
        conn = MagicMock()
        mock_get_conn.return_value.__enter__ = MagicMock(return_value=conn)
        mock_get_conn.return_value.__exit__ = MagicMock(return_value=False)
        mock_repo.claim_next_job.return_value = _make_job()

        assert worker._try_claim_job() == _make_job()
        mock_repo.claim_next_job.assert_called_once_with(conn)


class TestWorkerShutdown:
    def test_handles_keyboard_interrupt(self) -> None:
        worker, _repo, _runner = _make_worker()

        with patch.object(worker, "_try_claim_job", side_effect=KeyboardInterrupt):
            assert worker.run() == 0
