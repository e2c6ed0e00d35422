import re
from pathlib import Path

from pdfindex.logging.logger import Log
from pdfindex.processor.diagnostics import MissingToolLog
from pdfindex.processor.models import PageSize
from pdfindex.processor.process_runner import ProcessRunner, SpawnError

_PAGE_SIZE_RE = re.compile(
    r"^\s*page\s+(\d+)\s+size:\s*([\d.]+)\s*x\s*([\d.]+)\s*pts",
    re.IGNORECASE,
)


def parse_page_sizes(lines: list[str]) -> dict[int, PageSize]:
    """Parse ``Page <n> size: <w> x <h> pts`` lines from a pdfinfo report.

    Lines that do not match, or that carry non-positive sizes, are ignored.
    """
    sizes: dict[int, PageSize] = {}
    for line in lines:
        match = _PAGE_SIZE_RE.match(line)
        if not match:
            continue
        try:
            width = float(match.group(2))
            height = float(match.group(3))
        except ValueError:
            continue
        if width <= 0 or height <= 0:
            continue
        sizes[int(match.group(1))] = PageSize(width=width, height=height)
    return sizes


class PageDimensionExtractor:
    """Reads per-page sizes with one pdfinfo call per document."""

    def __init__(
        self,
        runner: ProcessRunner,
        missing_tools: MissingToolLog,
        binary: str = "pdfinfo",
    ) -> None:
        self._runner = runner
        self._missing_tools = missing_tools
        self._binary = binary

    def extract(self, path: Path, page_count: int) -> dict[int, PageSize]:
        """Return sizes keyed by 1-based page number; empty when unavailable."""
        if page_count <= 0:
            return {}
        result = self._runner.run(
            self._binary, ["-f", "1", "-l", str(page_count), str(path)]
        )
        if result.error is SpawnError.NOT_FOUND:
            self._missing_tools.warn_once(
                self._binary,
                f"{self._binary} not found, page dimensions will be unavailable",
            )
            return {}
        if not result.ok:
            Log.warning(
                f"{self._binary} failed for {path} "
                f"(exit={result.exit_code}, error={result.error}): {result.message}"
            )
            return {}
        return parse_page_sizes(result.lines)
