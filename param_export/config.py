"""
Configuration settings for the parameter-driven export job.

Uses Pydantic Settings to load environment variables (and an optional `.env`
file) for the parameter file, the relational source, the output rotation and
logging. The settings object is built once by the CLI and passed explicitly
to every stage.
"""
from __future__ import annotations

import codecs
from functools import lru_cache
from typing import List, Optional

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

REQUIRED_FIELDS = ("param_file", "db_url", "db_query", "output_file")


class ExportSettings(BaseSettings):
    # Parameter list
    param_file: Optional[str] = Field(None, alias="PARAM_FILE")
    base_dir: str = Field(".", alias="BASE_DIR")

    # Relational source
    db_driver: str = Field("psycopg", alias="DB_DRIVER")
    db_url: Optional[str] = Field(None, alias="DB_URL")
    db_user: Optional[str] = Field(None, alias="DB_USER")
    db_password: Optional[SecretStr] = Field(None, alias="DB_PASSWORD")
    db_query: Optional[str] = Field(None, alias="DB_QUERY")
    db_timeout_seconds: int = Field(0, ge=0, alias="DB_TIMEOUT")

    # Output rotation
    output_file: Optional[str] = Field(None, alias="OUTPUT_FILE")
    output_delimiter: str = Field(",", alias="OUTPUT_DELIMITER")
    output_max_count: int = Field(100_000, ge=1, alias="OUTPUT_MAX_COUNT")
    output_number_length: int = Field(3, ge=1, alias="OUTPUT_FILE_NUMBER_LENGTH")
    output_encoding: str = Field("utf-8", alias="OUTPUT_ENCODING")
    output_null: str = Field("", alias="OUTPUT_NULL")

    # Throttling
    sleep_seconds: int = Field(0, ge=0, alias="SLEEP")

    # Application
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("output_encoding")
    @classmethod
    def _known_encoding(cls, value: str) -> str:
        try:
            codecs.lookup(value)
        except LookupError as exc:
            raise ValueError(f"unknown encoding: {value}") from exc
        return value

    def missing_required(self) -> List[str]:
        """Return the aliases of required settings that are unset or blank."""
        missing = []
        for name in REQUIRED_FIELDS:
            value = getattr(self, name)
            if value is None or not str(value).strip():
                missing.append(type(self).model_fields[name].alias or name)
        return missing

    def password(self) -> Optional[str]:
        return self.db_password.get_secret_value() if self.db_password else None


@lru_cache(maxsize=1)
def get_settings() -> ExportSettings:
    """
    Retrieve a cached instance of ExportSettings to avoid repeated env parsing.
    """
    return ExportSettings()


__all__ = ["ExportSettings", "REQUIRED_FIELDS", "get_settings"]
