"""Runs external command-line tools and collects their stdout.

Every call blocks until the child exits, fails to spawn, or hits the
timeout. A timed-out or interrupted child is killed before returning.
"""

import subprocess
from dataclasses import dataclass, field
from enum import StrEnum

from pdfindex.logging.logger import Log


class SpawnError(StrEnum):
    NOT_FOUND = "not_found"
    TIMEOUT = "timeout"
    FAILED = "failed"


@dataclass(frozen=True)
class ProcessResult:
    """Outcome of one tool invocation."""

    exit_code: int | None = None
    lines: list[str] = field(default_factory=list)
    error: SpawnError | None = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None and self.exit_code == 0


class ProcessRunner:
    """Spawns a command and returns its stdout split into lines."""

    def __init__(self, timeout_seconds: float) -> None:
        self._timeout_seconds = timeout_seconds

    def run(self, command: str, args: list[str]) -> ProcessResult:
        Log.debug(f"Spawning {command} {' '.join(args)}")
        try:
            proc = subprocess.Popen(
                [command, *args],
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except FileNotFoundError as exc:
            return ProcessResult(error=SpawnError.NOT_FOUND, message=str(exc))
        except OSError as exc:
            return ProcessResult(error=SpawnError.FAILED, message=str(exc))

        with proc:
            try:
                stdout, stderr = proc.communicate(timeout=self._timeout_seconds)
            except subprocess.TimeoutExpired:
                proc.kill()
                proc.communicate()
                return ProcessResult(
                    error=SpawnError.TIMEOUT,
                    message=f"{command} timed out after {self._timeout_seconds}s",
                )
            except BaseException:
                proc.kill()
                raise

        return ProcessResult(
            exit_code=proc.returncode,
            lines=stdout.splitlines(),
            message=stderr.strip(),
        )
