"""Client configuration via environment variables."""

from functools import lru_cache
from urllib.parse import urlparse
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import field_validator
from pydantic_settings import BaseSettings

VERSION = "0.1.0"


class Settings(BaseSettings):
    """envsh settings loaded from environment variables."""

    # Host receiving submissions
    host_url: str = "https://envs.sh"

    # IANA zone used when printing expiry instants
    display_timezone: str = "UTC"

    # HTTP
    timeout: float = 60.0
    user_agent: str = f"envsh/{VERSION}"

    log_level: str = "WARNING"

    model_config = {
        "env_prefix": "ENVSH_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @field_validator("display_timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"unknown timezone: {value!r}")
        return value

    @property
    def host_scheme(self) -> str:
        return urlparse(self.host_url).scheme

    @property
    def host_hostname(self) -> str | None:
        return urlparse(self.host_url).hostname


@lru_cache
def get_settings() -> Settings:
    """Settings singleton, built on first use so a bad environment is reported by the CLI."""
    return Settings()
