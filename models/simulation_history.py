from sqlalchemy import Column, Integer, String, Date, DateTime, Float, Boolean, Text
from sqlalchemy.sql import func
from database import Base


class SimulationHistory(Base):
    __tablename__ = "simulation_history"

    history_no = Column(Integer, primary_key=True, autoincrement=True)
    member_no = Column(Integer, index=True, nullable=False)
    history_date = Column(Date, index=True, nullable=False)
    history_type = Column(String(20), nullable=True)
    history_predict = Column(String(20), nullable=True)  # the member's call, e.g. buy / sell
    history_result = Column(String(20), nullable=True)   # what actually happened; null until settled
    pnl = Column(Float, nullable=True)
    favorite = Column(Boolean, nullable=False, default=False, server_default='0')
    tags = Column(String(255), nullable=True)
    note = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=func.now(), server_default=func.now())

    @property
    def result(self) -> str:
        if self.history_result is None:
            return "unsolved"
        return "correct" if self.history_result == self.history_predict else "wrong"
