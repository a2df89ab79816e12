"""Caller identity for FastAPI routes."""

from typing import Optional

from fastapi import Header, HTTPException, Request, status

from bloodreport import config

MAX_USER_ID_LENGTH = 64


def get_current_user_id(
    request: Request,
    x_user_id: Optional[str] = Header(default=None),
) -> str:
    """Resolve the caller from the X-User-Id header, falling back to the default user."""
    user_id = (x_user_id or "").strip() or config.DEFAULT_USER_ID
    if len(user_id) > MAX_USER_ID_LENGTH:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="X-User-Id header is too long",
        )
    # per-user rate limiting keys off this
    request.state.user_id = user_id
    return user_id
