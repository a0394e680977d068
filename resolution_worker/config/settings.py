from pathlib import Path
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from resolution_worker.http.headers import DEFAULT_USER_AGENT

PdfEngine = Literal["pdfplumber", "pymupdf"]


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    listing_url: str

    db_host: str = "localhost"
    db_port: int = 5432
    db_database: str = "resolutions"
    db_username: str
    db_password: str
    db_pool_max_size: int = 5
    db_connect_timeout_seconds: int = 10

    http_timeout_seconds: int = 30
    http_user_agent: str = DEFAULT_USER_AGENT

    pdf_engine: PdfEngine = "pdfplumber"

    program_code: str = "C022"
    distinguish_express_withdrawal: bool = False
    classify_whole_document: bool = False

    archive_dir: Path | None = None

    @field_validator("listing_url")
    @classmethod
    def _require_listing_url(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("listing_url must not be empty")
        return value

    @field_validator("pdf_engine", mode="before")
    @classmethod
    def _normalize_pdf_engine(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value
