from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy.orm import Session
from sqlalchemy import text
from sqlalchemy.exc import OperationalError
from database import get_db
from utils.db_retry import db_retry
from utils.logger_factory import new_logger

router = APIRouter()


@router.get("/health")
@db_retry
def health_check(db: Session = Depends(get_db)):
    """
    Run a trivial query so load balancers can tell the API and its database apart.

    Returns:
        200: API and database are reachable
        500: the database query failed or returned something unexpected
    """
    log = new_logger("health_check")

    try:
        row = db.execute(text("SELECT 1 as health_check")).fetchone()
    except OperationalError:
        # retried by db_retry
        raise
    except Exception as e:
        log.error(f"Health check failed with non-retryable exception: {str(e)}")
        raise HTTPException(
            status_code=500,
            detail={"status": "unhealthy", "database": "disconnected"},
        )

    if not row or row[0] != 1:
        log.error("Health check failed - unexpected database response")
        raise HTTPException(
            status_code=500,
            detail={"status": "unhealthy", "database": "error"},
        )
    return {"status": "healthy", "database": "connected"}
