"""Define configuration for the project."""

import tomllib
from pathlib import Path
from typing import Literal

from pydantic import Field, computed_field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = ["settings"]


_app_config_path = Path(__file__).parent / "resources" / "app.toml"

with Path.open(_app_config_path, "rb") as f:
    _config = tomllib.load(f)
    _app_config = _config.get("app", {})
    _server_config = _app_config.get("server", {})
    _storage_config = _app_config.get("storage", {})
    _ingestion_config = _app_config.get("ingestion", {})
    _db_config = _app_config.get("db", {})
    _log_config = _app_config.get("logging", {})


class Settings(BaseSettings):
    """Application configuration settings."""

    # Environment configuration
    app_env: Literal["development", "testing", "production"] = Field(
        default="development",
        description="Current application environment determining behavior.",
        validation_alias="ENV",
    )

    # Server configuration
    host_binding: str = Field(
        default=_server_config.get("host_binding", "127.0.0.1"),
        description="Host address the server binds to.",
    )

    port: int = Field(
        default=_server_config.get("port", 8000),
        description="Network port the server listens on.",
    )

    version: str = Field(
        default=_server_config.get("version", "0.1.0"),
        description="Version of the application.",
    )

    allow_origin: list[str] = Field(
        default=_server_config.get("allow_origin", ["http://localhost:3000"]),
        description="CORS allowed origins for cross-origin requests.",
    )

    # Storage configuration
    project_storage_dir: Path = Field(
        default=Path(_storage_config.get("project_storage_dir", "data/projects")),
        description="Root directory holding one storage directory per image project.",
        validation_alias="PROJECT_STORAGE_DIR",
    )

    staging_dir: Path = Field(
        default=Path(_storage_config.get("staging_dir", "data/staging")),
        description="Directory for per-upload staging areas of extracted images.",
        validation_alias="STAGING_DIR",
    )

    # Ingestion configuration
    text_extensions: frozenset[str] = Field(
        default=frozenset(_ingestion_config.get("text_extensions", [])),
        description="File extensions accepted for text projects.",
    )

    image_extensions: frozenset[str] = Field(
        default=frozenset(_ingestion_config.get("image_extensions", [])),
        description="File extensions accepted for image projects.",
    )

    max_upload_size: int = Field(
        default=_ingestion_config.get("max_upload_size", 100 * 1024 * 1024),
        description="Maximum allowed size of an uploaded dataset in bytes.",
    )

    max_zip_members: int = Field(
        default=_ingestion_config.get("max_zip_members", 5000),
        description="Maximum number of image entries accepted from one archive.",
    )

    csv_delimiter: str = Field(
        default=_ingestion_config.get("csv_delimiter", ","),
        description="Delimiter used to split CSV lines into fields.",
    )

    csv_split_mode: Literal["field", "line"] = Field(
        default=_ingestion_config.get("csv_split_mode", "field"),
        description="Produce one record per CSV field or one record per CSV line.",
        validation_alias="CSV_SPLIT_MODE",
    )

    # Database configuration
    db_url: str = Field(
        default="sqlite+aiosqlite:///app.db",
        description="Database connection URL.",
        validation_alias="DATABASE_URL",
    )

    db_logging: bool = Field(
        default=_db_config.get("logging", False),
        description="Whether to enable SQL query logging.",
    )

    db_future: bool = Field(
        default=_db_config.get("future", True),
        description="Whether to use future SQLAlchemy features.",
    )

    db_timeout: int = Field(
        default=_db_config.get("timeout", 30),
        description="Timeout for database operations in seconds.",
    )

    db_pool_size: int = Field(
        default=_db_config.get("pool_size", 5),
        description="Size of the database connection pool.",
    )

    db_max_overflow: int = Field(
        default=_db_config.get("max_overflow", 10),
        description="Maximum number of connections to create beyond the pool size.",
    )

    db_pool_timeout: int = Field(
        default=_db_config.get("pool_timeout", 30),
        description="Timeout for acquiring a connection from the pool.",
    )

    db_pool_recycle: int = Field(
        default=_db_config.get("pool_recycle", 300),
        description="Time in seconds to recycle a connection.",
    )

    db_pool_pre_ping: bool = Field(
        default=_db_config.get("pool_pre_ping", True),
        description="Whether to check if a connection is alive before using it.",
    )

    clear_db_on_restart: bool = Field(
        default=False,
        validation_alias="CLEAR_DB_ON_RESTART",
        description="Whether to clear the database on application restart.",
    )

    # Log configuration
    log_dir: str = Field(
        default=_log_config.get("log_dir", "log"),
        description="Directory for storing log files.",
    )

    log_file: str = Field(
        default=_log_config.get("log_file", "app.log"),
        description="Name of the log file.",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Logging level (e.g., DEBUG, INFO, WARNING, ERROR).",
    )

    rotation: str = Field(
        default=_log_config.get("rotation", "10 MB"),
        description="Log rotation strategy (time or size-based).",
    )

    loki_url: str | None = Field(
        default=None,
        validation_alias="LOKI_URL",
        description="Loki push endpoint; production logs are shipped there if set.",
    )

    @computed_field
    @property
    def allowed_extensions(self) -> frozenset[str]:
        """All extensions accepted by the upload endpoint."""
        return self.text_extensions | self.image_extensions

    @computed_field
    @property
    def log_path(self) -> Path:
        """Path where application logs are stored."""
        return Path(self.log_dir) / self.log_file

    @computed_field
    @property
    def reload(self) -> bool:
        """Whether to enable auto-reload on code changes."""
        return bool(_server_config.get("reload")) and self.app_env == "development"

    @model_validator(mode="after")
    def validate_log_level(self) -> "Settings":
        """Adjust log level based on environment."""
        if self.app_env == "production" and self.log_level == "DEBUG":
            self.log_level = "INFO"
        return self

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )


# Create a single instance of Settings to use throughout the application
settings = Settings()
