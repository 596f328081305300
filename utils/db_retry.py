import logging
from sqlalchemy.exc import OperationalError
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type, before_sleep_log
from utils.logger_factory import new_logger

db_retry_logger = new_logger("db_retry")

# Shared policy for transient database failures (dropped connections, pool
# timeouts). Callers roll back their session before re-raising so the next
# attempt starts clean.
db_retry = retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=2, max=10),
    retry=retry_if_exception_type(OperationalError),
    before_sleep=before_sleep_log(db_retry_logger, logging.WARNING),
    reraise=True,
)
