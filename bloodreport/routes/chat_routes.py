"""Health assistant chat endpoints."""

import logging
import uuid
from typing import Optional, Sequence

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from bloodreport import config
from bloodreport.auth.deps import get_current_user_id
from bloodreport.db.session import get_db
from bloodreport.schemas.blood_test import ChatHistoryOut, ChatIn, ChatOut
from bloodreport.services import assistant
from bloodreport.services.blood_tests import get_user_test, latest_processed_test
from bloodreport.services.metrics import Metric, synthesize_metrics
from bloodreport.utils.rate_limit import limiter

logger = logging.getLogger("bloodreport.chat")

router = APIRouter(prefix="/api/chat", tags=["chat"])

history_store = assistant.ChatHistoryStore(max_messages=config.MAX_CHAT_HISTORY)


def _context_metrics(db: Session, user_id: str, test_id: Optional[str]) -> Optional[Sequence[Metric]]:
    test = None
    if test_id:
        test = get_user_test(db, user_id, test_id)
        if test is not None and not test.processed:
            test = None
    if test is None:
        test = latest_processed_test(db, user_id)
    if test is None:
        return None
    return synthesize_metrics(str(test.id), seed_mode=config.METRIC_SEED_MODE)


@router.post("", response_model=ChatOut)
@limiter.limit(config.CHAT_RATE_LIMIT)
async def chat(
    request: Request,
    payload: ChatIn,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    message = (payload.message or "").strip()
    if not message:
        raise HTTPException(status_code=400, detail="message is required")

    request_id = str(uuid.uuid4())
    metrics = _context_metrics(db, user_id, (payload.test_id or "").strip() or None)
    reply, source = await assistant.answer(
        message,
        metrics,
        history=history_store.get(user_id),
        request_id=request_id,
    )
    history_store.append(user_id, "user", message)
    history_store.append(user_id, "assistant", reply)

    logger.info({
        "function": "chat",
        "request_id": request_id,
        "user_id": user_id,
        "source": source,
        "has_metrics": bool(metrics),
        "chars": len(reply),
    })
    return {"request_id": request_id, "reply": reply, "source": source}


@router.get("/history", response_model=ChatHistoryOut)
def get_history(user_id: str = Depends(get_current_user_id)):
    messages = history_store.get(user_id)
    if not messages:
        messages = [{"role": "assistant", "content": assistant.GREETING}]
    return {"messages": messages}


@router.delete("/history", status_code=status.HTTP_204_NO_CONTENT)
def clear_history(user_id: str = Depends(get_current_user_id)):
    history_store.clear(user_id)
    return None
