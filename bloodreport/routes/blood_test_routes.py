# bloodreport/routes/blood_test_routes.py
import logging
from pathlib import Path
from typing import List

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from fastapi.responses import FileResponse
from pypdf.errors import PyPdfError
from sqlalchemy.orm import Session

from bloodreport import config
from bloodreport.auth.deps import get_current_user_id
from bloodreport.db.session import get_db
from bloodreport.models.blood_test import BloodTest
from bloodreport.schemas.blood_test import (
    AnalysisOut,
    BloodTestOut,
    BloodTestReportOut,
    BloodTestStatusOut,
)
from bloodreport.services.blood_tests import get_test_status, get_user_test, is_allowed_upload, list_user_tests
from bloodreport.services.reports import ReportNotReady, build_analysis, build_report
from bloodreport.services.storage import remove_upload, store_upload
from bloodreport.services.text_extract import extract_text_from_bytes

logger = logging.getLogger("bloodreport.blood_tests")

router = APIRouter(prefix="/api/blood-tests", tags=["blood-tests"])

NOT_READY_DETAIL = "Blood test is still being processed"


def _get_or_404(db: Session, user_id: str, test_id: str) -> BloodTest:
    item = get_user_test(db, user_id, test_id)
    if not item:
        raise HTTPException(status_code=404, detail="Blood test not found")
    return item


@router.post("/upload", response_model=BloodTestOut, status_code=status.HTTP_201_CREATED)
async def upload_blood_test(
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    data = await file.read()
    if not data:
        raise HTTPException(status_code=400, detail="Empty file")
    if len(data) > config.MAX_UPLOAD_MB * 1024 * 1024:
        raise HTTPException(status_code=413, detail=f"File exceeds {config.MAX_UPLOAD_MB} MB")
    if not is_allowed_upload(file.filename, file.content_type):
        raise HTTPException(status_code=415, detail="Unsupported file type; upload a PDF, CSV, JPEG or PNG")

    stored_path, _stored_name = store_upload(data, file.filename, user_id)
    item = BloodTest(
        user_id=user_id,
        file_path=stored_path,
        file_name=file.filename or "blood-test",
        file_type=(file.content_type or "").lower(),
        file_size=len(data),
    )
    db.add(item)
    db.commit()
    db.refresh(item)
    logger.info({
        "function": "upload_blood_test",
        "user_id": user_id,
        "blood_test_id": item.id,
        "size_bytes": len(data),
        "content_type": item.file_type,
    })
    return item


@router.get("", response_model=List[BloodTestOut])
def list_blood_tests(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return list_user_tests(db, user_id)


@router.get("/{test_id}", response_model=BloodTestOut)
def get_blood_test(
    test_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return _get_or_404(db, user_id, test_id)


@router.get("/{test_id}/status", response_model=BloodTestStatusOut)
def get_blood_test_status(
    test_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    found = get_test_status(db, user_id, test_id)
    if found is None:
        raise HTTPException(status_code=404, detail="Blood test not found")
    return {"id": test_id, "processed": found.processed, "created_at": found.created_at}


@router.get("/{test_id}/file")
def download_blood_test_file(
    test_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    item = _get_or_404(db, user_id, test_id)
    if not Path(item.file_path).exists():
        raise HTTPException(status_code=404, detail="Stored file not found")
    return FileResponse(
        item.file_path,
        media_type=item.file_type or "application/octet-stream",
        filename=item.file_name,
    )


@router.post("/{test_id}/process", response_model=BloodTestOut)
def process_blood_test(
    test_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    item = _get_or_404(db, user_id, test_id)
    if item.processed:
        return item

    source = "missing"
    path = Path(item.file_path)
    if path.exists():
        try:
            text, source = extract_text_from_bytes(path.read_bytes(), item.file_name, item.file_type)
            item.extracted_text = text
        except (ValueError, PyPdfError) as exc:
            # Extraction is best-effort; the report does not depend on it.
            source = "failed"
            logger.warning({"function": "process_blood_test", "blood_test_id": item.id, "error": str(exc)})

    item.processed = True
    db.add(item)
    db.commit()
    db.refresh(item)
    logger.info({
        "function": "process_blood_test",
        "user_id": user_id,
        "blood_test_id": item.id,
        "text_source": source,
        "chars": len(item.extracted_text or ""),
    })
    return item


@router.get("/{test_id}/report", response_model=BloodTestReportOut)
def get_blood_test_report(
    test_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    item = _get_or_404(db, user_id, test_id)
    try:
        report = build_report(item, seed_mode=config.METRIC_SEED_MODE, policy=config.SCORING_POLICY)
    except ReportNotReady:
        raise HTTPException(status_code=409, detail=NOT_READY_DETAIL)
    abnormal = sum(1 for m in report["metrics"] if m["status"] != "normal")
    logger.info({
        "function": "build_report",
        "blood_test_id": item.id,
        "abnormal_count": abnormal,
        "health_score": report["health_score"],
    })
    return report


@router.get("/{test_id}/analysis", response_model=AnalysisOut)
def get_blood_test_analysis(
    test_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    item = _get_or_404(db, user_id, test_id)
    try:
        return build_analysis(item, seed_mode=config.METRIC_SEED_MODE)
    except ReportNotReady:
        raise HTTPException(status_code=409, detail=NOT_READY_DETAIL)


@router.delete("/{test_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_blood_test(
    test_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    item = _get_or_404(db, user_id, test_id)
    removed = remove_upload(item.file_path)
    db.delete(item)
    db.commit()
    logger.info({"function": "delete_blood_test", "blood_test_id": test_id, "file_removed": removed})
    return None
