import pytest
from pydantic import ValidationError

from pdfindex.config.settings import Settings


class TestSettingsDefaults:
    def test_default_app_env(self) -> None:
        s = Settings()
        assert s.app_env == "dev"

    def test_default_db_port(self) -> None:
        s = Settings()
        assert s.db_port == 5432

    def test_default_max_job_attempts(self) -> None:
        s = Settings()
        assert s.max_job_attempts == 3

    def test_default_job_stale_after(self) -> None:
        s = Settings()
        assert s.job_stale_after_seconds == 3600

    def test_default_pdf_engine(self) -> None:
        s = Settings()
        assert s.pdf_engine == "pymupdf"

    def test_default_pdf_limits(self) -> None:
        s = Settings()
        assert s.pdf_max_pages == 250
        assert s.pdf_max_file_size_bytes is None
        assert s.pdf_min_embedded_text_length == 10

    def test_default_tool_timeout(self) -> None:
        s = Settings()
        assert s.tool_timeout_seconds == 60

    def test_default_ocr_settings(self) -> None:
        s = Settings()
        assert s.ocr_enabled is True
        assert s.ocr_raster_dpi == 300
        assert s.ocr_model_name == "PP-OCRv5_mobile"


class TestSettingsFromEnv:
    def test_loads_db_host(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DB_HOST", "db.example.com")
        s = Settings()
        assert s.db_host == "db.example.com"

    def test_loads_max_file_size(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PDF_MAX_FILE_SIZE_BYTES", "1048576")
        s = Settings()
        assert s.pdf_max_file_size_bytes == 1048576

    def test_loads_ocr_disabled(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OCR_ENABLED", "false")
        s = Settings()
        assert s.ocr_enabled is False

    def test_loads_tool_binaries(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PDFTOTEXT_BIN", "/opt/poppler/bin/pdftotext")
        s = Settings()
        assert s.pdftotext_bin == "/opt/poppler/bin/pdftotext"


class TestSettingsValidation:
    def test_invalid_db_port_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DB_PORT", "not_a_number")
        with pytest.raises(ValidationError):
            Settings()

    def test_invalid_max_pages_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PDF_MAX_PAGES", "many")
        with pytest.raises(ValidationError):
            Settings()
