"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from munchboxd.domain.models import PRODUCT_TYPES, SOURCE_TYPES
from munchboxd.domain.state import FormOptions

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_anon_key: str
    recent_limit: int = 5
    log_level: str = "INFO"
    extra_product_types: str | None = None
    extra_source_types: str | None = None
    session_secret: str | None = None
    session_https_only: bool = False
    max_clients: int = 1000
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    def form_options(self) -> FormOptions:
        """Return the select choices, including configured extras."""
        return FormOptions(
            product_types=_extend(PRODUCT_TYPES, self.extra_product_types),
            source_types=_extend(SOURCE_TYPES, self.extra_source_types),
        )


def parse_option_list(raw: str | None) -> tuple[str, ...]:
    """Parse a comma separated list of extra select options."""
    if raw is None:
        return ()
    options: list[str] = []
    for chunk in raw.split(","):
        value = chunk.strip()
        if value and value not in options:
            options.append(value)
    return tuple(options)


def _extend(defaults: tuple[str, ...], raw: str | None) -> tuple[str, ...]:
    extras = [value for value in parse_option_list(raw) if value not in defaults]
    return (*defaults, *extras)
