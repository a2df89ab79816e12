from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request


def user_rate_key(request: Request) -> str:
    """Return a per-user key when available; otherwise fall back to IP.

    get_current_user_id sets request.state.user_id before the limit is checked.
    """
    uid = getattr(request.state, "user_id", None)
    if uid:
        return f"user:{uid}"
    return get_remote_address(request)


limiter = Limiter(key_func=user_rate_key, default_limits=[])


def reset_limiter() -> None:
    limiter.reset()
