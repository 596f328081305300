from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from database import get_db
from schemas.quotes import QuoteRow
from services import simulation_dashboard_service
from utils.logger_factory import new_logger

router = APIRouter()


@router.get("/simulation/quotes", response_model=List[QuoteRow])
def get_quotes(
    to: date,
    unit: str = "10y",
    from_: Optional[date] = Query(default=None, alias="from"),
    db: Session = Depends(get_db),
):
    """
    Daily gold quotes with the model prediction for the dashboard chart.

    e.g. ``/api/simulation/quotes?to=2024-10-01&unit=1y`` or
    ``/api/simulation/quotes?from=2024-06-01&to=2024-10-01``
    """
    log = new_logger("get_quotes")
    if from_ is not None and from_ > to:
        log.info(f"Rejected quote range {from_} > {to}")
        raise HTTPException(status_code=400, detail="'from' must not be after 'to'")
    return simulation_dashboard_service.get_quotes(db, to, unit, from_)
