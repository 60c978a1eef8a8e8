"""
Configuration for the Pub/Sub message decoding interceptor.

Settings are read from PUBSUB_-prefixed environment variables, with an
optional .env file in the working directory.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Interceptor settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix='PUBSUB_',
        env_file='.env',
        extra='ignore',
    )

    # Attribute propagation
    HEADER_PREFIX: str = Field(default='x-pubsub-', min_length=1)

    # Payload decoding
    PARSE_JSON_PAYLOAD: bool = True

    # Logging
    LOG_LEVEL: str = 'INFO'
    LOG_JSON: bool = False


@lru_cache
def get_settings() -> Settings:
    """Cached settings singleton."""
    return Settings()
