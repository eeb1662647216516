"""Runtime configuration for jsonexpect."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


ReporterName = Literal["raise", "collect", "log", "console"]


class ExpectSettings(BaseSettings):
    """Settings shared by chains and reporters.

    Loads from environment variables automatically:
        JSONEXPECT_DEFAULT_REPORTER, JSONEXPECT_MAX_VALUE_LENGTH,
        JSONEXPECT_LOG_LEVEL, JSONEXPECT_SHOW_TRAIL
    """

    default_reporter: ReporterName = Field(
        default="raise", description="Reporter used when none is passed or bound to the context"
    )
    max_value_length: int = Field(
        default=50, ge=8, description="Truncation length for values shown in failure output"
    )
    log_level: str = Field(default="ERROR", description="Level used by LoggingReporter")
    show_trail: bool = Field(default=True, description="Include the operation trail in failure messages")

    model_config = SettingsConfigDict(
        extra="forbid",
        env_prefix="JSONEXPECT_",
    )


@lru_cache(maxsize=1)
def get_settings() -> ExpectSettings:
    """Return process-wide settings, read once from the environment."""
    return ExpectSettings()
