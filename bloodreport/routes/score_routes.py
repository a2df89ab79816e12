# bloodreport/routes/score_routes.py
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from bloodreport import config
from bloodreport.auth.deps import get_current_user_id
from bloodreport.db.session import get_db
from bloodreport.schemas.blood_test import HealthScoreOut
from bloodreport.services.blood_tests import list_user_tests
from bloodreport.services.reports import score_entry

router = APIRouter(prefix="/api/health-scores", tags=["health-scores"])


@router.get("", response_model=List[HealthScoreOut])
def list_health_scores(
    include_pending: bool = Query(False),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    tests = list_user_tests(db, user_id, processed_only=not include_pending, newest_first=False)
    return [
        score_entry(t, seed_mode=config.METRIC_SEED_MODE, policy=config.SCORING_POLICY)
        for t in tests
    ]
