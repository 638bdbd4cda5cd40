import logging
import os
from pathlib import Path
from typing import Generator, Optional

from sqlalchemy import create_engine, Engine, inspect
from sqlalchemy.orm import declarative_base, sessionmaker, Session

logger = logging.getLogger(__name__)

Base = declarative_base()

DB_PATH = Path(os.getenv("FINANCE_TRACKER_DB", "data/finance.db"))

# Alembic script directory, used when running migrations programmatically
BACKEND_DIR = Path(__file__).parent.parent          # …/backend/
ALEMBIC_DIR = BACKEND_DIR / "alembic"

_engine: Optional[Engine] = None


def _db_url(path: Path) -> str:
    return f"sqlite:///{path}"


def get_engine() -> Engine:
    """Return the process-wide engine, creating it on first use."""
    global _engine
    if _engine is None:
        DB_PATH.parent.mkdir(parents=True, exist_ok=True)
        _engine = create_engine(
            _db_url(DB_PATH),
            connect_args={"check_same_thread": False},
        )
        Base.metadata.create_all(bind=_engine)
    return _engine


def _run_alembic_upgrade(db_url: str, *, is_new_db: bool = False) -> None:
    """Run Alembic migrations to head for the given SQLite DB URL.

    Brand-new DBs already have the full current schema from ``create_all``,
    so they are only stamped to head.  Existing DBs run ``upgrade head``;
    a DB without an ``alembic_version`` table is stamped to the baseline
    revision first.
    """
    from alembic.config import Config
    from alembic import command

    alembic_cfg = Config()
    alembic_cfg.set_main_option("script_location", str(ALEMBIC_DIR))
    alembic_cfg.set_main_option("sqlalchemy.url", db_url)

    if is_new_db:
        command.stamp(alembic_cfg, "head")
        return

    tmp_engine = create_engine(db_url, connect_args={"check_same_thread": False})
    try:
        has_alembic_version = "alembic_version" in inspect(tmp_engine).get_table_names()
    finally:
        tmp_engine.dispose()

    if not has_alembic_version:
        command.stamp(alembic_cfg, "0001")

    command.upgrade(alembic_cfg, "head")


def init_db() -> None:
    """Create tables and bring the schema version up to date."""
    is_new_db = not DB_PATH.exists()
    get_engine()
    _run_alembic_upgrade(_db_url(DB_PATH), is_new_db=is_new_db)
    logger.info("Database ready at %s (new=%s)", DB_PATH, is_new_db)


SessionLocal = sessionmaker(autocommit=False, autoflush=False)


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal(bind=get_engine())
    try:
        yield db
    finally:
        db.close()
