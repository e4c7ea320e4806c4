"""Application settings loaded from environment variables.

Every value can be overridden with a ``MAKEUP_`` prefixed variable or from a
local ``.env`` file.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Typed configuration model for the comparator."""

    # HTTP parameters
    REQUEST_TIMEOUT: float = 15.0
    USER_AGENT: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
    )
    ACCEPT_LANGUAGE: str = "es-ES,es;q=0.9"

    # Worker threads used to fetch candidate product pages
    MAX_WORKERS: int = 8

    # Search defaults and limits
    DEFAULT_MAX_RESULTS: int = 50
    DEFAULT_MIN_SIMILARITY: float = 0.0
    MAX_RESULTS_CEILING: int = 500

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="MAKEUP_", extra="ignore"
    )


settings = Settings()
