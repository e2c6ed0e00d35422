from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "pdfindex"
    db_username: str = "pdfindex"
    db_password: str = "secret"
    db_pool_min_size: int = 1
    db_pool_max_size: int = 10

    max_job_attempts: int = 3
    job_stale_after_seconds: int = 3600
    job_poll_interval_seconds: int = 5

    files_root: str = "/app/files"

    pdf_engine: str = "pymupdf"
    pdf_max_file_size_bytes: int | None = None
    pdf_max_pages: int = 250
    pdf_min_embedded_text_length: int = 10

    pdftotext_bin: str = "pdftotext"
    pdfinfo_bin: str = "pdfinfo"
    pdftoppm_bin: str = "pdftoppm"
    tool_timeout_seconds: int = 60

    ocr_enabled: bool = True
    ocr_raster_dpi: int = 300
    machine_learning_url: str = "http://immich-machine-learning:3003"
    ocr_model_name: str = "PP-OCRv5_mobile"
    ocr_min_detection_score: float = 0.5
    ocr_min_recognition_score: float = 0.8
    ocr_timeout_seconds: int = 120

    search_snippet_radius: int = 60
