from functools import lru_cache
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import SettingsConfigDict, BaseSettings

OutputFormat = Literal["reading", "chirpstack", "datacake"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class CliSettings(BaseSettings):
    log_level: LogLevel = Field("WARNING", validation_alias="TRACKERLINK_LOG_LEVEL")
    output_format: OutputFormat = Field("reading", validation_alias="TRACKERLINK_OUTPUT_FORMAT")
    json_indent: int = Field(2, validation_alias="TRACKERLINK_JSON_INDENT")
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", populate_by_name=True, extra="ignore")

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: Any) -> Any:
        return value.strip().upper() if isinstance(value, str) else value


@lru_cache
def get_settings() -> CliSettings:
    return CliSettings()
