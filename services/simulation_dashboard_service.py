from datetime import date, timedelta
from typing import List, Optional

from sqlalchemy.orm import Session

from models.quotes_daily import GoldPrediction, QuotesDaily
from schemas.quotes import QuoteRow
from utils.db_retry import db_retry
from utils.logger_factory import new_logger

log = new_logger("simulation_dashboard")

# Lookback window per dashboard range button, in days
UNIT_DAYS = {
    "10y": 3650,
    "5y": 1825,
    "1y": 365,
    "3m": 90,
    "1m": 30,
    "1w": 7,
}
DEFAULT_UNIT_DAYS = 365


def resolve_range(to: date, unit: Optional[str], from_: Optional[date] = None) -> tuple[date, date]:
    """An explicit ``from_`` wins; otherwise the window ends at ``to`` and spans the unit's days inclusive."""
    if from_ is not None:
        return from_, to
    days = UNIT_DAYS.get(unit or "", DEFAULT_UNIT_DAYS)
    return to - timedelta(days=days - 1), to


@db_retry
def get_quotes(db: Session, to: date, unit: Optional[str] = "10y", from_: Optional[date] = None) -> List[QuoteRow]:
    start, end = resolve_range(to, unit, from_)
    rows = (
        db.query(QuotesDaily, GoldPrediction.pred_close)
        .outerjoin(GoldPrediction, GoldPrediction.date == QuotesDaily.date)
        .filter(QuotesDaily.date >= start, QuotesDaily.date <= end)
        .order_by(QuotesDaily.date.asc())
        .all()
    )
    log.info(f"Loaded {len(rows)} quote rows for {start} .. {end}")
    return [
        QuoteRow(
            date=quote.date,
            fx_rate=quote.fx_rate,
            vix=quote.vix,
            etf_volume=quote.etf_volume,
            gold_close=quote.krw_g_close,
            pred_close=pred_close,
        )
        for quote, pred_close in rows
    ]
