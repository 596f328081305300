import asyncio
import os
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from services.email_verification_service import get_email_verification_store
from utils.logger_factory import new_logger
from utils.periodic import run_periodic

EMAIL_CODE_CLEANUP_INTERVAL_SECONDS = float(os.environ.get("EMAIL_CODE_CLEANUP_INTERVAL_SECONDS", 300))
CORS_ALLOW_ORIGINS = [o.strip() for o in os.environ.get("CORS_ALLOW_ORIGINS", "*").split(",") if o.strip()]


@asynccontextmanager
async def lifespan(app: FastAPI):
    log = new_logger("lifespan")
    store = get_email_verification_store()
    cleanup_task = asyncio.create_task(
        run_periodic("email_code_cleanup", store.cleanup, EMAIL_CODE_CLEANUP_INTERVAL_SECONDS)
    )
    app.state.cleanup_task = cleanup_task
    log.info("Background tasks started: email_code_cleanup")
    yield
    cleanup_task.cancel()
    await asyncio.gather(cleanup_task, return_exceptions=True)
    log.info("Background tasks stopped")


app = FastAPI(title="Gold Simulation API", lifespan=lifespan)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    # Bodies are not logged: they carry passwords and verification codes
    log = new_logger("log_requests")
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    log.info(f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.1f} ms)")
    return response

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
def root():
    return {"message": "Gold Simulation API deployed."}

from api.auth import router as auth_router
from api.email_auth import router as email_auth_router
from api.simulation import router as simulation_router
from api.history import router as history_router
from api.healthcheck import router as health_router

app.include_router(auth_router, prefix="/api")
app.include_router(email_auth_router, prefix="/api")
app.include_router(simulation_router, prefix="/api")
app.include_router(history_router, prefix="/api")
app.include_router(health_router, prefix="/api")
