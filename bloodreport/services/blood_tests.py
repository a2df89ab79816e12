"""Query helpers for blood test records."""
from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import List, NamedTuple, Optional

from sqlalchemy.orm import Session

from bloodreport.models.blood_test import BloodTest

ALLOWED_CONTENT_TYPES = {
    "application/pdf",
    "text/csv",
    "text/plain",
    "image/jpeg",
    "image/png",
}
ALLOWED_EXTENSIONS = {".pdf", ".csv", ".txt", ".jpg", ".jpeg", ".png"}


class ReadinessStatus(NamedTuple):
    processed: bool
    created_at: datetime


def is_allowed_upload(filename: str | None, content_type: str | None) -> bool:
    mt = (content_type or "").split(";")[0].strip().lower()
    if mt in ALLOWED_CONTENT_TYPES:
        return True
    # Some clients send application/octet-stream; trust the extension then.
    return Path(filename or "").suffix.lower() in ALLOWED_EXTENSIONS


def get_user_test(db: Session, user_id: str, test_id: str) -> Optional[BloodTest]:
    return (
        db.query(BloodTest)
        .filter(BloodTest.id == test_id, BloodTest.user_id == user_id)
        .first()
    )


def list_user_tests(db: Session, user_id: str, processed_only: bool = False, newest_first: bool = True) -> List[BloodTest]:
    qry = db.query(BloodTest).filter(BloodTest.user_id == user_id)
    if processed_only:
        qry = qry.filter(BloodTest.processed.is_(True))
    order = BloodTest.created_at.desc() if newest_first else BloodTest.created_at.asc()
    return qry.order_by(order).all()


def latest_processed_test(db: Session, user_id: str) -> Optional[BloodTest]:
    return (
        db.query(BloodTest)
        .filter(BloodTest.user_id == user_id, BloodTest.processed.is_(True))
        .order_by(BloodTest.created_at.desc())
        .first()
    )


def get_test_status(db: Session, user_id: str, test_id: str) -> Optional[ReadinessStatus]:
    item = get_user_test(db, user_id, test_id)
    if not item:
        return None
    return ReadinessStatus(processed=bool(item.processed), created_at=item.created_at)


__all__ = [
    "ALLOWED_CONTENT_TYPES",
    "ALLOWED_EXTENSIONS",
    "ReadinessStatus",
    "get_test_status",
    "get_user_test",
    "is_allowed_upload",
    "latest_processed_test",
    "list_user_tests",
]
