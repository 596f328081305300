from sqlalchemy import Column, Date, Float
from database import Base


class QuotesDaily(Base):
    __tablename__ = "quotes_daily"

    date = Column(Date, primary_key=True)
    krw_g_open = Column(Float, nullable=True)    # KRW per gram
    krw_g_close = Column(Float, nullable=True)
    usd_oz_open = Column(Float, nullable=True)   # USD per troy ounce
    usd_oz_close = Column(Float, nullable=True)
    vix = Column(Float, nullable=True)
    etf_volume = Column(Float, nullable=True)
    fx_rate = Column(Float, nullable=True)       # KRW per USD


class GoldPrediction(Base):
    __tablename__ = "gold_prediction"

    date = Column(Date, primary_key=True)
    pred_close = Column(Float, nullable=False)   # predicted KRW/g close
