"""
Configuration module for Patient Records Service.
Uses Pydantic BaseSettings for validation - app fails fast on malformed config.
"""
from pathlib import Path
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings with validation.
    Values are read from the environment or a local .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database Configuration
    patient_svc_db_dir: str = Field(default="data", description="Database directory")
    patient_svc_db_file: str = Field(default="patients.db", description="Database filename")
    patient_svc_db_busy_timeout: int = Field(default=5000, description="SQLite busy timeout in milliseconds")

    # API Configuration
    patient_svc_host: str = Field(default="0.0.0.0", description="API host")
    patient_svc_port: int = Field(default=8000, description="API port")
    patient_svc_reload: bool = Field(default=False, description="Enable hot reload")
    patient_svc_cors_origins: str = Field(default="*", description="Allowed CORS origins (comma-separated)")

    @field_validator("patient_svc_db_busy_timeout")
    @classmethod
    def validate_busy_timeout(cls, value: int) -> int:
        """A negative busy timeout is rejected by SQLite, fail at startup instead."""
        if value < 0:
            raise ValueError("PATIENT_SVC_DB_BUSY_TIMEOUT must be >= 0")
        return value

    @property
    def database_path(self) -> str:
        """Get the full database path."""
        return str(Path(self.patient_svc_db_dir) / self.patient_svc_db_file)

    @property
    def cors_origins_list(self) -> List[str]:
        """Get the allowed CORS origins as a list."""
        return [o.strip() for o in self.patient_svc_cors_origins.split(",") if o.strip()]


settings = Settings()

# Module-level exports for existing code
DATABASE_DIR = settings.patient_svc_db_dir
DATABASE_FILE = settings.patient_svc_db_file
DATABASE_PATH = settings.database_path
DATABASE_BUSY_TIMEOUT = settings.patient_svc_db_busy_timeout

API_HOST = settings.patient_svc_host
API_PORT = settings.patient_svc_port
API_RELOAD = settings.patient_svc_reload
CORS_ORIGINS = settings.cors_origins_list
