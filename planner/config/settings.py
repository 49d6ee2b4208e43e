from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

from planner.config.constants import (
    BASE_DIR,
    DEFAULT_ALLOWED_ORIGINS,
    DEFAULT_FREE_VOUCHERS,
    DEFAULT_GROQ_FALLBACK_MODEL,
    DEFAULT_GROQ_MODEL,
    DEFAULT_OPENAI_MODEL,
    DEFAULT_OPENROUTER_MODEL,
    DEFAULT_RESEND_FROM,
)

load_dotenv(dotenv_path=BASE_DIR / ".env")


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    value = os.environ.get(name)
    if value is None:
        return default
    value = value.strip()
    return value or default


def _env_list(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = _env(name)
    if not raw:
        return default
    return tuple(part.strip() for part in raw.split(",") if part.strip())


def _env_flag(name: str) -> bool:
    return (_env(name) or "").lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    openai_api_key: Optional[str] = None
    openai_model: str = DEFAULT_OPENAI_MODEL
    groq_api_key: Optional[str] = None
    groq_model: str = DEFAULT_GROQ_MODEL
    groq_fallback_model: Optional[str] = DEFAULT_GROQ_FALLBACK_MODEL
    openrouter_api_key: Optional[str] = None
    openrouter_model: str = DEFAULT_OPENROUTER_MODEL
    disable_llm: bool = False
    stripe_secret_key: Optional[str] = None
    stripe_price_ai_id: Optional[str] = None
    stripe_price_custom_id: Optional[str] = None
    free_vouchers: tuple[str, ...] = DEFAULT_FREE_VOUCHERS
    resend_api_key: Optional[str] = None
    resend_from: str = DEFAULT_RESEND_FROM
    allowed_origins: tuple[str, ...] = field(default=DEFAULT_ALLOWED_ORIGINS)
    base_url: Optional[str] = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            openai_api_key=_env("OPENAI_API_KEY"),
            openai_model=_env("OPENAI_MODEL", DEFAULT_OPENAI_MODEL),
            groq_api_key=_env("GROQ_API_KEY"),
            groq_model=_env("GROQ_MODEL", DEFAULT_GROQ_MODEL),
            groq_fallback_model=_env("GROQ_FALLBACK_MODEL", DEFAULT_GROQ_FALLBACK_MODEL),
            openrouter_api_key=_env("OPENROUTER_API_KEY"),
            openrouter_model=_env("OPENROUTER_MODEL", DEFAULT_OPENROUTER_MODEL),
            disable_llm=_env_flag("PLANNER_DISABLE_LLM"),
            stripe_secret_key=_env("STRIPE_SECRET_KEY"),
            # STRIPE_PRICE_ID is the older single-product variable
            stripe_price_ai_id=_env("STRIPE_PRICE_AI_ID") or _env("STRIPE_PRICE_ID"),
            stripe_price_custom_id=_env("STRIPE_PRICE_CUSTOM_ID"),
            free_vouchers=tuple(code.upper() for code in _env_list("FREE_VOUCHER_CODES", DEFAULT_FREE_VOUCHERS)),
            resend_api_key=_env("RESEND_API_KEY"),
            resend_from=_env("RESEND_FROM", DEFAULT_RESEND_FROM),
            allowed_origins=_env_list("ALLOWED_ORIGINS", DEFAULT_ALLOWED_ORIGINS),
            base_url=_env("BASE_URL"),
            log_level=(_env("LOG_LEVEL", "INFO") or "INFO").upper(),
        )

    @property
    def has_llm_provider(self) -> bool:
        return bool(self.openai_api_key or self.groq_api_key or self.openrouter_api_key)


def get_settings() -> Settings:
    return Settings.from_env()
