from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Central configuration for the content engine.

    Values are read from environment variables prefixed with GTM_*, e.g.:
      GTM_ANTHROPIC_MODEL, GTM_REQUEST_TIMEOUT, GTM_MAX_TOKENS_FULL

    The API key is also accepted from the plain ANTHROPIC_API_KEY variable.
    """

    model_config = SettingsConfigDict(env_prefix="GTM_", env_file=".env", extra="ignore")

    anthropic_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("GTM_ANTHROPIC_API_KEY", "ANTHROPIC_API_KEY"),
        description="Anthropic API key; LLM features report NO_API_KEY without it",
    )
    anthropic_model: str = Field(
        default="claude-sonnet-4-20250514",
        description="Model used for every generation call",
    )
    request_timeout: float = Field(default=120.0, gt=0, description="HTTP timeout in seconds")

    # Token budgets
    max_tokens_full: int = Field(default=16000, ge=1, description="Full content library")
    max_tokens_calendar: int = Field(default=8000, ge=1)
    max_tokens_research: int = Field(default=4000, ge=1, description="Autofill, critique, competitors")
    max_tokens_default: int = Field(default=2000, ge=1, description="Single-post style calls")
    max_tokens_hashtags: int = Field(default=1500, ge=1)

    stream_progress_every: int = Field(
        default=50,
        ge=1,
        description="Emit a progress event every N streamed chunks",
    )
    insights_max_age_days: int = Field(default=7, ge=0)

    templates_dir: Optional[str] = Field(
        default=None,
        description="Override for the Jinja2 templates directory",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
