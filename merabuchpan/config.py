"""Application settings loaded from the environment.

The only required value is the Gemini API credential. Everything else has a
default and can be overridden with ``MERABUCHPAN_*`` environment variables or
a ``.env`` file next to the launcher.
"""

from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_MODEL_NAME: str = "gemini-2.5-flash-image"
"""Gemini model used for image generation."""

DEFAULT_DOWNLOAD_FILENAME: str = "merabuchpan_reunion.png"
"""Filename offered when the user downloads the generated image."""


class MissingApiKeyError(RuntimeError):
    """Raised at startup when no API credential is configured."""


class Settings(BaseSettings):
    """Application settings read from the environment and ``.env``.

    Attributes:
        api_key: Gemini API key, read from API_KEY (or GEMINI_API_KEY).
        model_name: Image generation model identifier.
        download_filename: Suggested filename for the downloaded result.
        log_level: Logging level. Options: CRITICAL, ERROR, WARNING, INFO, DEBUG.
        log_fmt: Logging message format.
    """

    api_key: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("API_KEY", "GEMINI_API_KEY")
    )
    model_name: str = DEFAULT_MODEL_NAME
    download_filename: str = DEFAULT_DOWNLOAD_FILENAME
    log_level: str = "INFO"
    log_fmt: str = "%(asctime)s | %(levelname)s | %(name)s: %(message)s"

    model_config = SettingsConfigDict(
        env_prefix="MERABUCHPAN_",
        env_file=".env",
        extra="ignore",
        case_sensitive=False,
        protected_namespaces=(),
    )


def require_api_key(settings: Settings) -> str:
    """Return the configured API key.

    Raises:
        MissingApiKeyError: If the key is unset or blank.
    """
    if not settings.api_key or not settings.api_key.strip():
        raise MissingApiKeyError("API_KEY environment variable not set")
    return settings.api_key.strip()


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Return the process-wide Settings, loading them on first use."""
    global _settings
    if not _settings:
        _settings = Settings()
    return _settings
