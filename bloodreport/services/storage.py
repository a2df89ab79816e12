"""Local storage helpers for uploaded blood test documents."""
from __future__ import annotations

import uuid
from pathlib import Path
from typing import Tuple

from bloodreport import config


def _user_dir(user_id: str) -> Path:
    safe_user = "".join(ch for ch in (user_id or "") if ch.isalnum() or ch in "-_") or "anonymous"
    path = Path(config.UPLOAD_ROOT) / safe_user
    path.mkdir(parents=True, exist_ok=True)
    return path


def store_upload(data: bytes, original_name: str | None, user_id: str) -> Tuple[str, str]:
    """Persist the raw upload to disk and return (path, stored filename)."""
    suffix = Path(original_name or "").suffix.lower()
    safe_suffix = suffix if len(suffix) <= 10 else ""
    filename = f"{uuid.uuid4().hex}{safe_suffix}"
    path = _user_dir(user_id) / filename
    path.write_bytes(data)
    return str(path), filename


def remove_upload(path: str | None) -> bool:
    """Delete a stored file; returns False when it was already gone."""
    if not path:
        return False
    target = Path(path)
    if not target.exists():
        return False
    target.unlink()
    return True


__all__ = ["remove_upload", "store_upload"]
