from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any


class BaseTagReader(ABC):
    """Contract for all PDF metadata tag adapters."""

    @abstractmethod
    def read_tags(self, path: Path) -> dict[str, Any]:
        """Read document-level tags from a PDF file.

        Args:
            path: Filesystem path of the PDF.

        Returns:
            Best-effort tag dict with the keys ``PageCount``, ``Title``,
            ``Author``, ``Subject``, ``Creator``, ``Producer`` and
            ``CreateDate``. Missing values are None.

        Raises:
            PdfExtractionError: if the file cannot be opened as a PDF.
        """
