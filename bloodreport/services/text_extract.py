"""File-to-text helpers (PDF/text/CSV)."""
from __future__ import annotations

import io
from typing import Optional, Tuple

from pypdf import PdfReader

SUPPORTED_IMAGE_EXT = {".png", ".jpg", ".jpeg"}


def extract_text_from_bytes(data: bytes, filename: str, content_type: str) -> Tuple[Optional[str], str]:
    """Return (text, source). Images carry no text layer and yield (None, "image")."""
    lowered = (filename or "").lower()
    mt = content_type or ""

    if mt == "application/pdf" or lowered.endswith(".pdf"):
        reader = PdfReader(io.BytesIO(data))
        pages = [page.extract_text() or "" for page in reader.pages]
        return "\n".join(pages).strip() or None, "pdf"

    if mt.startswith("image/") or any(lowered.endswith(ext) for ext in SUPPORTED_IMAGE_EXT):
        return None, "image"

    try:
        return data.decode("utf-8"), "text"
    except UnicodeDecodeError as exc:
        raise ValueError("Unable to decode file as UTF-8 text") from exc


__all__ = ["extract_text_from_bytes"]
