import threading

from pdfindex.logging.logger import Log


class MissingToolLog:
    """Warns about a missing external binary at most once per process.

    One instance is built by ``build_processor`` and shared by every
    extractor, so documents processed in sequence do not repeat the
    warning.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._reported: set[str] = set()

    def warn_once(self, tool: str, message: str) -> bool:
        """Log *message* the first time *tool* is reported. Returns True if logged."""
        with self._lock:
            if tool in self._reported:
                return False
            self._reported.add(tool)
        Log.warning(message)
        return True

    def was_reported(self, tool: str) -> bool:
        with self._lock:
            return tool in self._reported
