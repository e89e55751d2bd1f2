from __future__ import annotations
import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()

def _int_env(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer") from None

def _float_env(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be a number") from None

@dataclass(frozen=True)
class Settings:
    bot_token: str
    gemini_api_key: str | None
    llm_model: str
    results_webhook_url: str | None = None
    llm_timeout_sec: float = 30.0
    questions_per_session: int = 10
    ui_default_lang: str = "vi"  # vi/en

def load_settings() -> Settings:
    load_dotenv()
    bot_token = os.getenv("BOT_TOKEN")
    if not bot_token:
        raise RuntimeError("BOT_TOKEN is required")

    gemini_api_key = os.getenv("GOOGLE_API_KEY") or os.getenv("GEMINI_API_KEY") or None
    llm_model = os.getenv("LLM_MODEL", "gemini-2.5-flash").strip()
    llm_timeout_sec = _float_env("LLM_TIMEOUT_SEC", 30.0)
    if llm_timeout_sec <= 0:
        raise RuntimeError("LLM_TIMEOUT_SEC must be positive")
    results_webhook_url = (os.getenv("RESULTS_WEBHOOK_URL") or "").strip() or None
    questions_per_session = _int_env("QUESTIONS_PER_SESSION", 10)
    if questions_per_session < 1:
        raise RuntimeError("QUESTIONS_PER_SESSION must be at least 1")
    ui_default_lang = os.getenv("UI_DEFAULT_LANG", "vi").strip().lower()
    if ui_default_lang not in {"vi", "en"}:
        raise RuntimeError("UI_DEFAULT_LANG must be vi or en")

    return Settings(
        bot_token=bot_token,
        gemini_api_key=gemini_api_key,
        llm_model=llm_model,
        results_webhook_url=results_webhook_url,
        llm_timeout_sec=llm_timeout_sec,
        questions_per_session=questions_per_session,
        ui_default_lang=ui_default_lang,
    )
