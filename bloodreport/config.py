"""Environment-driven settings for the blood report backend."""
import os
from pathlib import Path

from dotenv import load_dotenv

from bloodreport.services.health_score import ScoringPolicy
from bloodreport.services.metrics import SEED_MODES, SEED_MODE_PER_METRIC

BASE_DIR = Path(__file__).resolve().parent
ENV_PATH = BASE_DIR / ".env"

load_dotenv(ENV_PATH, override=True)


def _env_str(name: str, default: str = "") -> str:
    return (os.getenv(name, default) or default).strip()


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, default))
    except (ValueError, TypeError):
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = (os.getenv(name) or "").strip().lower()
    if not raw:
        return default
    return raw in {"1", "true", "yes", "on"}


def _env_list(name: str, default: list[str]) -> list[str]:
    raw = os.getenv(name)
    if not raw:
        return default
    return [item.strip() for item in raw.split(",") if item.strip()]


# --- storage ---
DATABASE_URL = _env_str("DATABASE_URL", "sqlite:///./bloodreport.db")
SQL_ECHO = _env_bool("SQL_ECHO", False)
UPLOAD_ROOT = Path(_env_str("UPLOAD_ROOT") or (BASE_DIR / "uploads"))
MAX_UPLOAD_MB = _env_int("MAX_UPLOAD_MB", 10)

# --- callers ---
DEFAULT_USER_ID = _env_str("DEFAULT_USER_ID", "anonymous")
CORS_ORIGINS = _env_list("CORS_ORIGINS", ["http://localhost:5173", "http://127.0.0.1:5173"])

# --- assistant ---
OPENROUTER_API_KEY = _env_str("OPENROUTER_API_KEY")
OPENROUTER_MODEL = _env_str("OPENROUTER_MODEL", "qwen/qwen-2.5-72b-instruct")
OPENROUTER_URL = _env_str("OPENROUTER_URL", "https://openrouter.ai/api/v1/chat/completions")
AI_CHAT_ENABLED = _env_bool("AI_CHAT_ENABLED", True)
LLM_TIMEOUT_SECONDS = _env_int("LLM_TIMEOUT_SECONDS", 20)
MAX_CHAT_HISTORY = _env_int("MAX_CHAT_HISTORY", 50)
CHAT_RATE_LIMIT = _env_str("CHAT_RATE_LIMIT", "30/minute")

# --- report synthesis ---
METRIC_SEED_MODE = _env_str("METRIC_SEED_MODE", SEED_MODE_PER_METRIC).lower()
if METRIC_SEED_MODE not in SEED_MODES:
    METRIC_SEED_MODE = SEED_MODE_PER_METRIC

SCORING_POLICY = ScoringPolicy(
    baseline=_env_int("SCORE_BASELINE", 85),
    elevated_penalty=_env_int("SCORE_ELEVATED_PENALTY", 3),
    low_penalty=_env_int("SCORE_LOW_PENALTY", 3),
)
