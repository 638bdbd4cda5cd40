import logging
import os
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .database import SessionLocal, get_db, get_engine, init_db
from .routers import analytics, budgets, categories, seed, transactions
from .schemas import HealthResponse
from .services.seeder import seed_sample_transactions

__version__ = "0.3.0"

LOG_LEVEL = os.getenv("FINANCE_TRACKER_LOG_LEVEL", "INFO").upper()
CORS_ORIGINS = [
    o.strip()
    for o in os.getenv(
        "FINANCE_TRACKER_CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000"
    ).split(",")
    if o.strip()
]
SEED_ON_STARTUP = os.getenv("FINANCE_TRACKER_SEED_ON_STARTUP") == "1"

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    # ── Startup ───────────────────────────────────────────────────────────────
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    init_db()

    if SEED_ON_STARTUP:
        db = SessionLocal(bind=get_engine())
        try:
            seed_sample_transactions(db)
        finally:
            db.close()

    yield
    # ── Shutdown ──────────────────────────────────────────────────────────────
    get_engine().dispose()


app = FastAPI(
    title="Personal Finance Tracker",
    description="Income/expense tracking, monthly budgets, and spending analytics.",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(transactions.router)
app.include_router(budgets.router)
app.include_router(analytics.router)
app.include_router(categories.router)
app.include_router(seed.router)


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Database error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Database operation failed"})


@app.get("/health", response_model=HealthResponse, tags=["meta"])
def health(db: Session = Depends(get_db)):
    try:
        db.execute(text("SELECT 1"))
        database = True
    except SQLAlchemyError:
        logger.warning("Health check: database unreachable", exc_info=True)
        database = False
    return {"status": "ok" if database else "degraded", "version": __version__, "database": database}
