from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

DEFAULT_OPENROUTER_MODELS = [
    "openrouter/auto",
    "meta-llama/llama-3.2-3b-instruct:free",
    "google/gemma-2-2b-it:free",
    "microsoft/phi-3-mini-128k-instruct:free",
]


def _get_env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def _get_env_bool(name: str, default: bool) -> bool:
    raw = _get_env(name, None)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_env_float(name: str, default: float) -> float:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_env_optional_float(name: str) -> float | None:
    raw = _get_env(name, None)
    if raw is None:
        return None
    try:
        return float(raw)
    except ValueError:
        return None


def _get_env_list(name: str, default: list[str]) -> tuple[str, ...]:
    raw = _get_env(name, None)
    if raw is None:
        return tuple(default)
    values = [item.strip() for item in raw.split(",")]
    clean = [item for item in values if item]
    return tuple(clean) if clean else tuple(default)


@dataclass(frozen=True)
class Settings:
    openai_api_key: str | None
    openrouter_key_prefix: str
    openrouter_base_url: str
    openai_base_url: str
    openrouter_models: tuple[str, ...]
    openai_default_model: str
    llm_app_title: str
    llm_timeout_s: float | None
    llm_temperature: float
    resume_max_upload_bytes: int
    resume_prompt_char_budget: int
    resume_max_tokens: int
    career_max_tokens: int
    match_max_tokens: int
    mock_delay_s: float
    ocr_lang: str
    ocr_scale: float
    tesseract_cmd: str | None
    ai_debug: bool
    log_level: str
    sentry_dsn: str | None
    rate_limit: str
    rate_limit_enabled: bool
    cors_allowed_origins: tuple[str, ...]
    cors_allow_origin_regex: str | None
    cors_allow_credentials: bool


def load_settings() -> Settings:
    return Settings(
        openai_api_key=(_get_env("OPENAI_API_KEY") or "").strip() or None,
        openrouter_key_prefix=_get_env("OPENROUTER_KEY_PREFIX", "sk-or-") or "sk-or-",
        openrouter_base_url=_get_env("OPENROUTER_BASE_URL", "https://openrouter.ai/api/v1") or "https://openrouter.ai/api/v1",
        openai_base_url=_get_env("OPENAI_BASE_URL", "https://api.openai.com/v1") or "https://api.openai.com/v1",
        openrouter_models=_get_env_list("OPENROUTER_MODELS", DEFAULT_OPENROUTER_MODELS),
        openai_default_model=_get_env("OPENAI_DEFAULT_MODEL", "gpt-3.5-turbo") or "gpt-3.5-turbo",
        llm_app_title=_get_env("LLM_APP_TITLE", "Connectiv Talent") or "Connectiv Talent",
        llm_timeout_s=_get_env_optional_float("LLM_TIMEOUT_S"),
        llm_temperature=_get_env_float("LLM_TEMPERATURE", 0.1),
        resume_max_upload_bytes=_get_env_int("RESUME_MAX_UPLOAD_BYTES", 10 * 1024 * 1024),
        resume_prompt_char_budget=_get_env_int("RESUME_PROMPT_CHAR_BUDGET", 3000),
        resume_max_tokens=_get_env_int("RESUME_MAX_TOKENS", 500),
        career_max_tokens=_get_env_int("CAREER_MAX_TOKENS", 2000),
        match_max_tokens=_get_env_int("MATCH_MAX_TOKENS", 500),
        mock_delay_s=_get_env_float("MOCK_DELAY_S", 1.0),
        ocr_lang=_get_env("OCR_LANG", "eng") or "eng",
        ocr_scale=_get_env_float("OCR_SCALE", 2.0),
        tesseract_cmd=_get_env("TESSERACT_CMD"),
        ai_debug=_get_env_bool("AI_DEBUG", False),
        log_level=_get_env("LOG_LEVEL", "INFO") or "INFO",
        sentry_dsn=_get_env("SENTRY_DSN"),
        rate_limit=_get_env("RATE_LIMIT", "60/minute") or "60/minute",
        rate_limit_enabled=_get_env_bool("RATE_LIMIT_ENABLED", True),
        cors_allowed_origins=_get_env_list(
            "CORS_ALLOWED_ORIGINS",
            [
                "http://localhost:5173",
                "http://127.0.0.1:5173",
                "http://localhost:8080",
                "http://localhost:3000",
            ],
        ),
        cors_allow_origin_regex=_get_env("CORS_ALLOW_ORIGIN_REGEX"),
        cors_allow_credentials=_get_env_bool("CORS_ALLOW_CREDENTIALS", False),
    )


settings = load_settings()

if settings.resume_max_upload_bytes <= 0:
    raise RuntimeError("RESUME_MAX_UPLOAD_BYTES must be a positive number of bytes.")

if settings.ocr_scale <= 0:
    raise RuntimeError("OCR_SCALE must be greater than zero.")
