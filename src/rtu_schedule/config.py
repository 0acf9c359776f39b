"""Client configuration loaded from environment variables.

Every field can be set through an ``RTU_``-prefixed environment variable
(``RTU_BASE_URL``, ``RTU_TIMEOUT`` ...) or a ``.env`` file in the working
directory. Durations follow the upstream conventions: request and cache
timeouts are milliseconds, retry waits are seconds.
"""

from pydantic import Field
from pydantic_settings import BaseSettings

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.6367.118 Safari/537.36"
)


class ScheduleConfig(BaseSettings):
    """RTU timetable client configuration.

    Settings are loaded from environment variables with sensible defaults.
    For local development, create a .env file in the project root.
    """

    # Source host
    base_url: str = Field(
        default="https://nodarbibas.rtu.lv",
        description="RTU timetable host",
    )
    timeout: int = Field(
        default=10_000,
        gt=0,
        description="Per-request timeout in milliseconds",
    )
    user_agent: str = Field(
        default=DEFAULT_USER_AGENT,
        description="User-Agent header sent with every request",
    )
    language: str = Field(
        default="lv",
        description="Language of the catalog page (lv or en)",
    )

    # Caches
    cache_timeout: int = Field(
        default=5 * 60 * 1000,
        ge=0,
        description="TTL of cached API responses in milliseconds",
    )
    discovery_cache_timeout: int = Field(
        default=60 * 60 * 1000,
        ge=0,
        description="TTL of cached period/program catalogs in milliseconds",
    )
    auto_discover: bool = Field(
        default=True,
        description="Reserved; discovery always runs lazily",
    )

    # Retries (TransientError only)
    retry_attempts: int = Field(
        default=3,
        ge=1,
        description="Total attempts per request, including the first",
    )
    retry_wait: float = Field(
        default=1.0,
        ge=0,
        description="Seconds to wait between attempts",
    )

    # Event timestamps are epoch milliseconds; this is the wall clock they map to
    timezone: str = Field(
        default="Europe/Riga",
        description="IANA timezone used for event dates and times",
    )

    # Logging
    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format (for production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    model_config = {
        "env_prefix": "RTU_",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


# Singleton pattern
_config: ScheduleConfig | None = None


def get_config() -> ScheduleConfig:
    """Get the configuration singleton.

    Returns:
        ScheduleConfig: Configuration instance built from the environment
    """
    global _config
    if _config is None:
        _config = ScheduleConfig()
    return _config
