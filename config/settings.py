from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ProcessingSettings(BaseSettings):
    """Settings for document decoding and structuring."""

    model_config = SettingsConfigDict(env_prefix="TRACEDECK_PROCESSING_")

    # Input checks
    verify_signature: bool = Field(default=True, description="Reject files whose magic bytes disagree with the extension")
    max_file_size_mb: int = Field(default=200, description="Maximum input file size in MB")

    # Decoding
    include_image_data: bool = Field(default=True, description="Keep raw image payloads in the extracted content")
    extract_tables: bool = Field(default=True, description="Enable table extraction for PDF and DOCX")

    # Structuring
    layout_row_height: int = Field(default=100, description="Vertical offset between stacked visual elements")
    min_language_words: int = Field(default=5, description="Minimum word count before language detection is attempted")

    @field_validator("max_file_size_mb", "layout_row_height", "min_language_words")
    @classmethod
    def non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("must be >= 0")
        return v


class BatchSettings(BaseSettings):
    """Settings for multi-file processing."""

    model_config = SettingsConfigDict(env_prefix="TRACEDECK_BATCH_")

    max_workers: int = Field(default=4, description="Maximum number of documents decoded concurrently")
    timeout_s: float = Field(default=120.0, description="Per-document processing deadline in seconds")

    @field_validator("max_workers")
    @classmethod
    def at_least_one_worker(cls, v: int) -> int:
        if v < 1:
            raise ValueError("max_workers must be >= 1")
        return v


class LoggingSettings(BaseSettings):
    """Handlers attached to the ``tracedeck`` logger."""

    model_config = SettingsConfigDict(env_prefix="TRACEDECK_LOGGING_")

    log_level: str = Field(default="INFO", description="Level of the tracedeck logger and its console handler")
    log_format: str = Field(default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                            description="Line format when JSON lines are off")

    # Rotating file handler, off unless a path is given
    log_file: Optional[Path] = Field(default=None, description="Destination of the rotating file handler")
    log_file_level: str = Field(default="DEBUG", description="Level written to the file handler")
    max_log_size_mb: int = Field(default=10, description="Size in MB at which the file rotates")
    backup_count: int = Field(default=5, description="Rotated files kept next to the active one")

    console_logging: bool = Field(default=True, description="Attach a stderr handler")
    json_logging: bool = Field(default=False, description="Write one JSON object per record on every handler")


class Settings(BaseSettings):
    """Main settings class that combines all configuration sections."""

    model_config = SettingsConfigDict(
        env_prefix="TRACEDECK_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    environment: str = Field(default="development", description="Environment (development, staging, production)")

    # Configuration sections
    processing: ProcessingSettings = Field(default_factory=ProcessingSettings)
    batch: BatchSettings = Field(default_factory=BatchSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        # Override settings based on environment
        if self.environment == "production":
            self.logging.log_level = "WARNING"
        elif self.environment == "development" and "logging" not in kwargs:
            self.logging.log_level = "DEBUG"


# Global settings instance
settings = Settings()

__all__ = [
    "Settings",
    "ProcessingSettings",
    "BatchSettings",
    "LoggingSettings",
    "settings",
]
