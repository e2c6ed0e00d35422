from pathlib import Path

from pdfindex.logging.logger import Log
from pdfindex.processor.diagnostics import MissingToolLog
from pdfindex.processor.models import ExtractedPage, PageSize, TextSource
from pdfindex.processor.process_runner import ProcessRunner, SpawnError


def parse_page_text(lines: list[str]) -> str:
    """Join pdftotext output lines into one trimmed page text."""
    return "\n".join(lines).strip()


def classify_text(text: str, min_embedded_length: int) -> TextSource:
    if len(text) >= min_embedded_length:
        return TextSource.EMBEDDED
    return TextSource.NONE


class PageTextExtractor:
    """Extracts embedded text page by page, one pdftotext call per page."""

    def __init__(
        self,
        runner: ProcessRunner,
        missing_tools: MissingToolLog,
        min_embedded_length: int = 10,
        binary: str = "pdftotext",
    ) -> None:
        self._runner = runner
        self._missing_tools = missing_tools
        self._min_embedded_length = min_embedded_length
        self._binary = binary

    def extract(
        self,
        path: Path,
        page_count: int,
        sizes: dict[int, PageSize] | None = None,
    ) -> list[ExtractedPage]:
        sizes = sizes or {}
        pages: list[ExtractedPage] = []
        tool_missing = False
        for page_number in range(1, page_count + 1):
            text = "" if tool_missing else self._extract_page(path, page_number)
            if text is None:
                tool_missing = True
                text = ""
            size = sizes.get(page_number)
            pages.append(
                ExtractedPage(
                    page_number=page_number,
                    text=text,
                    text_source=classify_text(text, self._min_embedded_length),
                    width=size.width if size else None,
                    height=size.height if size else None,
                )
            )
        return pages

    def _extract_page(self, path: Path, page_number: int) -> str | None:
        """Return page text, "" on a per-page failure, None if the tool is missing."""
        page = str(page_number)
        result = self._runner.run(
            self._binary, ["-f", page, "-l", page, "-enc", "UTF-8", str(path), "-"]
        )
        if result.error is SpawnError.NOT_FOUND:
            self._missing_tools.warn_once(
                self._binary,
                f"{self._binary} not found, embedded page text will be unavailable",
            )
            return None
        if not result.ok:
            Log.warning(
                f"{self._binary} failed on page {page_number} of {path} "
                f"(exit={result.exit_code}, error={result.error}): {result.message}"
            )
            return ""
        return parse_page_text(result.lines)
