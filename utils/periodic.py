import asyncio
from typing import Callable
from utils.logger_factory import new_logger

log = new_logger("periodic")


async def run_periodic(name: str, func: Callable[[], object], interval_seconds: float):
    """
    Run ``func`` every ``interval_seconds`` until cancelled.

    ``func`` is synchronous and runs in a worker thread so it never blocks the
    event loop. A failing run is logged and the loop keeps its schedule.
    """
    log.info(f"Starting periodic task {name} (every {interval_seconds}s)")
    try:
        while True:
            await asyncio.sleep(interval_seconds)
            try:
                await asyncio.to_thread(func)
            except Exception:
                log.exception(f"Periodic task {name} failed; will retry next interval")
    except asyncio.CancelledError:
        log.info(f"Periodic task {name} cancelled")
        raise
