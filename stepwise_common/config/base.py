"""Base configuration classes."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseAppSettings(BaseSettings):
    """Common base of every stepwise settings class.

    Values come from the environment, then from a ``.env`` file in the working
    directory. Subclasses only set their ``env_prefix``; keys meant for other
    sections (or other programs) sharing the same ``.env`` are ignored.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )
