from pydantic_settings import BaseSettings
from pydantic import Field
from typing import List
import os


class Config(BaseSettings):
    # Platform REST backend
    backend_url: str = Field(default="http://localhost:5000", alias="BACKEND_URL")
    backend_timeout: float = Field(default=15.0, alias="BACKEND_TIMEOUT")

    # Printable form uploads (megabytes)
    upload_max_mb: int = Field(default=10, alias="UPLOAD_MAX_MB")
    admin_pack_upload_max_mb: int = Field(default=20, alias="ADMIN_PACK_UPLOAD_MAX_MB")

    # In-memory wizard sessions kept per process
    wizard_max_sessions: int = Field(default=500, alias="WIZARD_MAX_SESSIONS")

    cors_origins: List[str] = Field(
        default=["http://localhost", "http://localhost:5173"],
        alias="CORS_ORIGINS",
    )

    is_production: bool = (
        os.getenv("ENVIRONMENT", "development").lower() == "production"
    )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        populate_by_name = True


# Instantiate the settings
config = Config()
