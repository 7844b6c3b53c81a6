"""
Runtime settings loaded from environment variables.

Call ``load_dotenv()`` before the first ``get_settings()`` so values from
``.env`` are picked up.
"""

import os
from dataclasses import dataclass, field
from functools import lru_cache

DEFAULT_MODEL = "gpt-3.5-turbo"
PLACEHOLDER_API_KEY = "your_openai_api_key_here"


def _env_list(name: str, default: str) -> list[str]:
    raw = os.environ.get(name, default)
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass(frozen=True)
class Settings:
    openai_api_key: str | None = None
    openai_model: str = DEFAULT_MODEL
    openai_timeout_seconds: float = 60.0
    openai_max_retries: int = 0

    session_max_age_seconds: float = 60 * 60  # 1 hour
    session_sweep_interval_seconds: float = 60 * 60

    rate_limit_per_minute: int = 30
    cors_origins: list[str] = field(default_factory=lambda: ["*"])

    host: str = "0.0.0.0"
    port: int = 8000

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            openai_api_key=os.environ.get("OPENAI_API_KEY") or None,
            openai_model=os.environ.get("OPENAI_MODEL") or DEFAULT_MODEL,
            openai_timeout_seconds=float(os.environ.get("OPENAI_TIMEOUT_SECONDS", "60")),
            openai_max_retries=int(os.environ.get("OPENAI_MAX_RETRIES", "0")),
            session_max_age_seconds=float(os.environ.get("SESSION_MAX_AGE_SECONDS", "3600")),
            session_sweep_interval_seconds=float(
                os.environ.get("SESSION_SWEEP_INTERVAL_SECONDS", "3600")
            ),
            rate_limit_per_minute=int(os.environ.get("RATE_LIMIT_PER_MINUTE", "30")),
            cors_origins=_env_list("CORS_ORIGINS", "*"),
            host=os.environ.get("HOST", "0.0.0.0"),
            port=int(os.environ.get("PORT", "8000")),
        )

    @property
    def api_key_configured(self) -> bool:
        return bool(self.openai_api_key) and self.openai_api_key != PLACEHOLDER_API_KEY


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()
