from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Bundled translation files shipped with the package
DEFAULT_I18N_DIR = Path(__file__).parent.parent / "i18n" / "translations"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    API_V1_STR: str = "/v1"
    PROJECT_NAME: str = "Polyglot API"
    DEBUG: bool = False

    HOST: str = "0.0.0.0"
    PORT: int = 8000

    ENVIRONMENT: Literal["local", "staging", "production"] = "local"

    # Locale used when the client sends no usable Accept-Language header
    DEFAULT_LANGUAGE: str = "zh"

    # Directory of <lang>.json / <lang>.toml message catalogs
    I18N_DIR: Path = DEFAULT_I18N_DIR

    # Strict loading fails start-up on the first bad catalog file instead
    # of skipping it
    I18N_STRICT: bool = False

    # "catalog": fall back to full tag / primary subtag matching against the
    # catalog languages. "first": take the highest ranked header entry as-is.
    LOCALE_POLICY: Literal["catalog", "first"] = "catalog"

    @field_validator("DEFAULT_LANGUAGE", mode="after")
    @classmethod
    def validate_default_language(cls, v: str) -> str:
        """Reject an empty default locale."""
        v = v.strip()
        if not v:
            raise ValueError("DEFAULT_LANGUAGE must not be empty")
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
