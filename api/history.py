from datetime import date
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database import get_db
from schemas.simulation_history import HistoryListResponse, HistoryStatsResponse, HistorySummaryResponse
from services import simulation_history_service
from utils.session_auth import require_login

router = APIRouter()


@router.get("/history", response_model=HistoryListResponse)
def get_history(
    from_: date = Query(default=date(2023, 1, 1), alias="from"),
    to: date = date(2024, 12, 31),
    type: str = "",
    sort: str = "date,desc",
    page: int = 1,
    size: int = 20,
    db: Session = Depends(get_db),
    session=Depends(require_login),
):
    return simulation_history_service.get_history(
        db, session["member_no"], from_, to, type, sort, page, size
    )


@router.get("/history/stats", response_model=HistoryStatsResponse)
def get_history_stats(
    from_: date = Query(alias="from"),
    to: date = Query(),
    type: str = "",
    db: Session = Depends(get_db),
    session=Depends(require_login),
):
    return simulation_history_service.get_history_stats(db, session["member_no"], from_, to, type)


@router.get("/history/summary", response_model=HistorySummaryResponse)
def get_history_summary(db: Session = Depends(get_db), session=Depends(require_login)):
    return simulation_history_service.get_history_summary(db, session["member_no"])
