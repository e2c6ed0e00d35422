import shutil
from pathlib import Path

from pdfindex.processor.exceptions import FileReadError


class Storage:
    """Filesystem access for original PDFs and scratch directories.

    Relative asset paths resolve against *files_root*; absolute paths are
    used as-is.
    """

    FILES_ROOT = Path("/app/files")

    def __init__(self, files_root: Path | None = None) -> None:
        self._files_root = files_root if files_root is not None else self.FILES_ROOT

    def resolve(self, original_path: str) -> Path:
        path = Path(original_path)
        if path.is_absolute():
            return path
        return self._files_root / path

    def exists(self, path: Path) -> bool:
        return path.is_file()

    def size(self, path: Path) -> int:
        """Return file size in bytes.

        Raises:
            FileReadError: if the file cannot be stat'ed.
        """
        try:
            return path.stat().st_size
        except OSError as exc:
            raise FileReadError(f"Cannot read file {path}: {exc}") from exc

    def remove_directory(self, path: Path) -> None:
        shutil.rmtree(path, ignore_errors=True)
