# --- imports (top of bloodreport/app.py) ---
import json
import logging
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from bloodreport import config
from bloodreport.middleware.tracing import TRACE_ID_CTX_VAR, TracingMiddleware
from bloodreport.models import init_db
from bloodreport.routes import blood_test_routes, chat_routes, score_routes
from bloodreport.utils.exceptions import (
    handle_http_exception,
    handle_rate_limit,
    handle_unhandled_exception,
    handle_validation_exception,
)
from bloodreport.utils.rate_limit import limiter


# --- logging setup ---
class JsonFormatter(logging.Formatter):
    def format(self, record):  # type: ignore[override]
        msg = record.msg if isinstance(record.msg, dict) else record.getMessage()
        payload = {
            "timestamp": datetime.now(timezone.utc).isoformat(timespec="seconds"),
            "level": record.levelname,
            "logger": record.name,
            "function": record.funcName,
            "message": msg,
            "trace_id": TRACE_ID_CTX_VAR.get() or None,
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging() -> logging.Logger:
    logger = logging.getLogger("bloodreport")
    logger.setLevel(logging.INFO)
    if not any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(JsonFormatter())
        logger.addHandler(handler)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("uvicorn").setLevel(logging.INFO)
    return logger


logger = configure_logging()

# --- app & router setup ---
app = FastAPI(title="Blood Report Backend", version="0.1.0")

app.state.limiter = limiter
app.add_middleware(TracingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(StarletteHTTPException, handle_http_exception)
app.add_exception_handler(RequestValidationError, handle_validation_exception)
app.add_exception_handler(RateLimitExceeded, handle_rate_limit)
app.add_exception_handler(Exception, handle_unhandled_exception)


@app.on_event("startup")
def _init_db():
    init_db()
    config.UPLOAD_ROOT.mkdir(parents=True, exist_ok=True)
    logger.info({
        "function": "startup",
        "seed_mode": config.METRIC_SEED_MODE,
        "ai_chat": bool(config.AI_CHAT_ENABLED and config.OPENROUTER_API_KEY),
    })


app.include_router(blood_test_routes.router)
app.include_router(score_routes.router)
app.include_router(chat_routes.router)


@app.get("/health")
def health():
    return {"status": "ok"}
