"""
Read-side queries over a member's simulation history: a paged list, range
statistics and an all-time summary.

A row is *unsolved* while ``history_result`` is null, *correct* when the
result equals the member's prediction and *wrong* otherwise. Accuracy only
counts settled rows: correct / (correct + wrong), or 0.0 when nothing settled.
"""
from datetime import date
from typing import Optional

from sqlalchemy import and_, case, func, or_
from sqlalchemy.orm import Session

from models.simulation_history import SimulationHistory
from schemas.simulation_history import (
    HistoryListResponse,
    HistoryStatsResponse,
    HistorySummaryResponse,
    SimulationHistoryItem,
)
from utils.db_retry import db_retry
from utils.logger_factory import new_logger

log = new_logger("simulation_history")

MAX_PAGE_SIZE = 100
DEFAULT_SORT = "date,desc"
SORT_COLUMNS = {
    "date": SimulationHistory.history_date,
    "pnl": SimulationHistory.pnl,
}

_settled = SimulationHistory.history_result.isnot(None)
_correct = case((and_(_settled, SimulationHistory.history_result == SimulationHistory.history_predict), 1), else_=0)
_wrong = case(
    (and_(_settled, or_(SimulationHistory.history_predict.is_(None),
                        SimulationHistory.history_result != SimulationHistory.history_predict)), 1),
    else_=0,
)
_unsolved = case((SimulationHistory.history_result.is_(None), 1), else_=0)


def _accuracy(correct: int, wrong: int) -> float:
    return correct / (correct + wrong) if (correct + wrong) > 0 else 0.0


def _order_by(sort: Optional[str]):
    field, _, direction = (sort or DEFAULT_SORT).partition(",")
    column = SORT_COLUMNS.get(field.strip().lower())
    direction = direction.strip().lower()
    if column is None or direction not in ("asc", "desc"):
        column, direction = SimulationHistory.history_date, "desc"
    tiebreak = SimulationHistory.history_no
    if direction == "asc":
        return [column.asc(), tiebreak.asc()]
    return [column.desc(), tiebreak.desc()]


def _filtered(db: Session, member_no: int, from_: date, to: date, history_type: Optional[str]):
    query = db.query(SimulationHistory).filter(
        SimulationHistory.member_no == member_no,
        SimulationHistory.history_date >= from_,
        SimulationHistory.history_date <= to,
    )
    if history_type:
        query = query.filter(SimulationHistory.history_type == history_type)
    return query


@db_retry
def get_history(
    db: Session,
    member_no: int,
    from_: date,
    to: date,
    history_type: Optional[str] = "",
    sort: Optional[str] = DEFAULT_SORT,
    page: int = 1,
    size: int = 20,
) -> HistoryListResponse:
    page = max(1, page)
    size = min(max(1, size), MAX_PAGE_SIZE)
    offset = (page - 1) * size

    query = _filtered(db, member_no, from_, to, history_type)
    total = query.count()
    rows = query.order_by(*_order_by(sort)).offset(offset).limit(size).all()

    log.info(f"History for member {member_no}: page={page} size={size} total={total}")
    return HistoryListResponse(
        items=[SimulationHistoryItem.from_orm_row(row) for row in rows],
        page=page,
        size=size,
        total=total,
    )


@db_retry
def get_history_stats(
    db: Session,
    member_no: int,
    from_: date,
    to: date,
    history_type: Optional[str] = "",
) -> HistoryStatsResponse:
    query = db.query(
        func.count(SimulationHistory.history_no),
        func.coalesce(func.sum(_correct), 0),
        func.coalesce(func.sum(_wrong), 0),
        func.coalesce(func.sum(_unsolved), 0),
    ).filter(
        SimulationHistory.member_no == member_no,
        SimulationHistory.history_date >= from_,
        SimulationHistory.history_date <= to,
    )
    if history_type:
        query = query.filter(SimulationHistory.history_type == history_type)
    total, correct, wrong, unsolved = query.one()

    return HistoryStatsResponse(
        total=int(total),
        correct=int(correct),
        wrong=int(wrong),
        unsolved=int(unsolved),
        accuracy=_accuracy(int(correct), int(wrong)),
    )


@db_retry
def get_history_summary(db: Session, member_no: int) -> HistorySummaryResponse:
    total, correct, wrong, total_pnl, avg_pnl, max_pnl, min_pnl = db.query(
        func.count(SimulationHistory.history_no),
        func.coalesce(func.sum(_correct), 0),
        func.coalesce(func.sum(_wrong), 0),
        func.coalesce(func.sum(SimulationHistory.pnl), 0.0),
        func.coalesce(func.avg(SimulationHistory.pnl), 0.0),
        func.coalesce(func.max(SimulationHistory.pnl), 0.0),
        func.coalesce(func.min(SimulationHistory.pnl), 0.0),
    ).filter(SimulationHistory.member_no == member_no).one()

    total, correct, wrong = int(total), int(correct), int(wrong)
    return HistorySummaryResponse(
        total=total,
        correct=correct,
        wrong=wrong,
        unsolved=total - correct - wrong,
        totalPnl=float(total_pnl),
        avgPnl=float(avg_pnl),
        maxPnl=float(max_pnl),
        minPnl=float(min_pnl),
        accuracy=_accuracy(correct, wrong),
    )
