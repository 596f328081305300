from pydantic import BaseModel
from typing import List, Optional


class SimulationHistoryItem(BaseModel):
    id: int
    date: str
    type: Optional[str] = None
    answer: Optional[str] = None
    actual: Optional[str] = None
    result: str  # "correct" | "wrong" | "unsolved"
    pnl: Optional[float] = None
    note: Optional[str] = None

    @classmethod
    def from_orm_row(cls, row) -> "SimulationHistoryItem":
        return cls(
            id=row.history_no,
            date=row.history_date.isoformat(),
            type=row.history_type,
            answer=row.history_predict,
            actual=row.history_result,
            result=row.result,
            pnl=row.pnl,
            note=row.note,
        )


class HistoryListResponse(BaseModel):
    items: List[SimulationHistoryItem]
    page: int
    size: int
    total: int


class HistoryStatsResponse(BaseModel):
    total: int
    correct: int
    wrong: int
    unsolved: int
    accuracy: float


class HistorySummaryResponse(BaseModel):
    total: int
    correct: int
    wrong: int
    unsolved: int
    totalPnl: float
    avgPnl: float
    maxPnl: float
    minPnl: float
    accuracy: float
