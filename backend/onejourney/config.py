"""
Runtime configuration for the OneJourney backend.

All settings come from environment variables (optionally loaded from a
`.env` file). Provider credentials are optional: when they are missing the
route source and the AI assistant degrade to their fallbacks instead of
failing at startup.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import List, Optional

logger = logging.getLogger(__name__)


LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def _env_str(name: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except (TypeError, ValueError):
        logger.warning("Invalid %s value %r; falling back to default %s", name, raw, default)
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except (TypeError, ValueError):
        logger.warning("Invalid %s value %r; falling back to default %s", name, raw, default)
        return default


def _env_list(name: str, default: List[str]) -> List[str]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass(frozen=True)
class Settings:
    """Centralized settings with environment variable overrides"""

    google_maps_api_key: Optional[str] = None
    openrouter_api_key: Optional[str] = None

    llm_model: str = "mistralai/mistral-7b-instruct"
    llm_base_url: str = "https://openrouter.ai/api/v1"
    llm_timeout_seconds: float = 30.0
    llm_referer: str = "http://localhost:5000"
    llm_app_title: str = "OneJourney Smart Mobility"

    directions_timeout_seconds: float = 10.0

    initial_balance: int = 2500
    history_limit: int = 20

    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    static_dir: str = "public"
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 5000

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            google_maps_api_key=_env_str("GOOGLE_MAPS_API_KEY"),
            openrouter_api_key=_env_str("OPENROUTER_API_KEY"),
            llm_model=_env_str("LLM_MODEL", cls.llm_model),
            llm_base_url=_env_str("LLM_BASE_URL", cls.llm_base_url),
            llm_timeout_seconds=_env_float("LLM_TIMEOUT", cls.llm_timeout_seconds),
            llm_referer=_env_str("LLM_REFERER", cls.llm_referer),
            llm_app_title=_env_str("LLM_APP_TITLE", cls.llm_app_title),
            directions_timeout_seconds=_env_float("DIRECTIONS_TIMEOUT", cls.directions_timeout_seconds),
            initial_balance=_env_int("INITIAL_BALANCE", cls.initial_balance),
            history_limit=_env_int("HISTORY_LIMIT", cls.history_limit),
            cors_origins=_env_list("CORS_ORIGINS", ["*"]),
            static_dir=_env_str("STATIC_DIR", cls.static_dir),
            log_level=_env_str("LOG_LEVEL", cls.log_level).upper(),
            host=_env_str("HOST", cls.host),
            port=_env_int("PORT", cls.port),
        )


def configure_logging(level: str = "INFO") -> None:
    """Install a basic root handler; a no-op if the host already configured one."""
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
