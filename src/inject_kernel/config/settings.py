# src/inject_kernel/config/settings.py
from pydantic_settings import BaseSettings, SettingsConfigDict

from inject_kernel.di.types import DEFAULT_TAG


class InjectSettings(BaseSettings):
    """
    Injector defaults, overridable through INJECT_* environment variables
    or a .env file.
    """

    tag: str = DEFAULT_TAG
    tag_required: bool = False

    model_config = SettingsConfigDict(
        env_prefix="INJECT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )
