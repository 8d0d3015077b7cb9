"""Base configuration classes and logging utilities."""

import sys
from functools import lru_cache
from pathlib import Path

from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_LOG_FORMAT = (
    '<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | '
    '<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>'
)


class CitecountSettings(BaseSettings):
    """Settings for citation count retrieval.

    Values come from ``CITECOUNT_*`` environment variables or a ``.env`` file.
    The same values back the default preference store, so ``nasaads_api_key``
    is what a ``nasaadsApiKey`` preference lookup returns.
    """

    model_config = SettingsConfigDict(
        env_prefix='CITECOUNT_',
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore',
    )

    nasaads_api_key: str | None = Field(
        None, description='NASA ADS API token sent as a Bearer header'
    )
    semanticscholar_delay_seconds: float = Field(
        3.0,
        ge=0.0,
        description='Minimum wait after each Semantic Scholar response',
    )
    request_timeout: float = Field(
        30.0, gt=0.0, description='HTTP request timeout in seconds'
    )
    user_agent: str = Field(
        'citecount/0.1 (mailto:citecount@example.com)',
        description='User-Agent header for outgoing requests',
    )
    autoretrieve: str = Field(
        'none',
        description="Provider key used when records are added, or 'none'",
    )
    log_level: str = Field('INFO', description='Console log level')
    log_file: Path | None = Field(None, description='Optional log file path')

    @field_validator('log_level')
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept log levels in any case."""
        level = v.upper()
        if level not in {'TRACE', 'DEBUG', 'INFO', 'SUCCESS', 'WARNING', 'ERROR', 'CRITICAL'}:
            raise ValueError(f'Unknown log level: {v}')
        return level


@lru_cache(maxsize=1)
def get_settings() -> CitecountSettings:
    """Return the process-wide settings instance."""
    return CitecountSettings()


def setup_logging(settings: CitecountSettings) -> None:
    """Set up logging configuration using loguru.

    Args:
        settings: Settings carrying the log level and optional log file.

    Returns:
        None: Replaces the default loguru handler with console and file sinks.
    """
    logger.remove()
    # enqueue keeps lines whole when several batches log at once
    logger.add(
        sys.stderr,
        format=DEFAULT_LOG_FORMAT,
        level=settings.log_level,
        colorize=True,
        enqueue=True,
    )

    if settings.log_file:
        logger.add(
            settings.log_file,
            format=DEFAULT_LOG_FORMAT,
            level='DEBUG',
            rotation='10 MB',
            enqueue=True,
        )
