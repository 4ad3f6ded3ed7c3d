from decimal import Decimal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "intake"
    db_username: str = "intake"
    db_password: str = "secret"

    job_backend: str = "http"
    api_base_url: str = "http://localhost:5000"
    api_timeout_seconds: int = 30

    analysis_engine: str = "local"
    pdf_engine: str = "pdfplumber"
    analysis_sample_chars: int = 5000

    poll_interval_seconds: float = 5.0
    credit_unit_price: Decimal = Decimal("0.01")
    currency_symbol: str = "£"
    supported_file_formats: list[str] = ["PDF", "DOCX", "XLSX", "PPTX", "TXT", "HTML"]
