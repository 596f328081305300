import datetime
from pydantic import BaseModel
from typing import Optional


class QuoteRow(BaseModel):
    date: datetime.date
    fx_rate: Optional[float] = None
    vix: Optional[float] = None
    etf_volume: Optional[float] = None
    gold_close: Optional[float] = None
    pred_close: Optional[float] = None  # null when no prediction exists for the day
