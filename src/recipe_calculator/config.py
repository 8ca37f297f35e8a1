"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

DEFAULT_CSV_URL = (
    "https://docs.google.com/spreadsheets/d/e/"
    "2PACX-1vQrQG3zWeCq5fZWIP4jI4oeyvbhPqKqhUEMcWFp7har4X4iTCc0263pIcR6xilbztIg0H99bPOQrmsW"  # noqa: E501
    "/pub?output=csv"
)
DEFAULT_SUBMIT_URL = (
    "https://script.google.com/macros/s/"
    "AKfycbzv9fHqG3Iep-KHllBu4viL1ejNZLG5rozKPHcItG1voGosV_OoU8nTsY1X3bCXx039lA"
    "/exec"
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    ingredients_csv_url: str = DEFAULT_CSV_URL
    ingredients_submit_url: str = DEFAULT_SUBMIT_URL
    http_timeout_seconds: float = 10.0
    log_level: str = "INFO"
    session_ttl_seconds: int = 3600
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
