from __future__ import annotations

import os
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv

from interview.errors import ConfigError


load_dotenv()


def _optional_float(name: str) -> Optional[float]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return float(value)


class Settings:
    """Application settings loaded from environment variables.

    Keep all credentials and config centralized here.
    """

    def __init__(self) -> None:
        self.app_env: str = os.getenv("APP_ENV", "development")
        self.openai_api_key: Optional[str] = os.getenv("OPENAI_API_KEY")
        self.openai_model: str = os.getenv("OPENAI_MODEL", "gpt-4")
        self.openai_base_url: str = os.getenv(
            "OPENAI_BASE_URL", "https://api.openai.com/v1"
        )
        # Unset means no client-side timeout.
        self.openai_timeout: Optional[float] = _optional_float("OPENAI_TIMEOUT")
        self.question_temperature: float = float(os.getenv("QUESTION_TEMPERATURE", "0.2"))
        self.question_max_tokens: int = int(os.getenv("QUESTION_MAX_TOKENS", "100"))
        self.feedback_temperature: float = float(os.getenv("FEEDBACK_TEMPERATURE", "0.3"))
        self.feedback_max_tokens: int = int(os.getenv("FEEDBACK_MAX_TOKENS", "150"))
        self.host: str = os.getenv("HOST", "0.0.0.0")
        self.port: int = int(os.getenv("PORT", "3000"))
        self.log_level: str = os.getenv("LOG_LEVEL", "INFO")

    @property
    def is_development(self) -> bool:
        return self.app_env.lower() in {"dev", "development", "local"}

    def validate(self) -> "Settings":
        if not self.openai_api_key:
            raise ConfigError(
                "OPENAI_API_KEY not set. Please configure it in environment or .env"
            )
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
