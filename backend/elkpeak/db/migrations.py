import logging
import os
from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import inspect

from elkpeak.core.config import get_settings
from elkpeak.db.session import engine

logger = logging.getLogger("elk.migrations")


def _alembic_config() -> Config:
    """
    Alembic config pointing at backend/alembic.ini, with sqlalchemy.url taken
    from settings (env.py also overrides it).
    """
    settings = get_settings()
    backend_dir = Path(__file__).resolve().parents[2]  # .../backend
    cfg = Config(str(backend_dir / "alembic.ini"))
    cfg.set_main_option("script_location", str(backend_dir / "alembic"))
    cfg.set_main_option("sqlalchemy.url", settings.database_url)
    return cfg


def stamp_head_if_missing() -> bool:
    """
    If alembic_version table is missing, stamp DB to current head.
    Returns True if a stamp was performed.
    """
    insp = inspect(engine)
    if insp.has_table("alembic_version"):
        return False

    logger.warning("alembic_version missing; stamping database to Alembic head (no schema changes).")
    command.stamp(_alembic_config(), "head")
    return True


def upgrade_head() -> None:
    """Run alembic upgrade head."""
    logger.info("Running Alembic upgrade head.")
    command.upgrade(_alembic_config(), "head")


def _bool_env(name: str, default: bool = False) -> bool:
    v = os.getenv(name)
    if v is None:
        return default
    return v.strip().lower() in {"1", "true", "yes", "on"}


def run_migrations_on_startup() -> None:
    """
    Production only. Controlled by env vars:
    - ALEMBIC_STAMP_IF_MISSING=true: create alembic_version if missing (safe/no-op)
    - ALEMBIC_UPGRADE_ON_STARTUP=true: run upgrade head (applies migrations)
    """
    settings = get_settings()
    if settings.environment != "production":
        return

    # If upgrade is requested, do NOT stamp first: stamping would mark the DB
    # as up-to-date and skip migrations.
    if _bool_env("ALEMBIC_UPGRADE_ON_STARTUP"):
        upgrade_head()
        return

    if _bool_env("ALEMBIC_STAMP_IF_MISSING") and stamp_head_if_missing():
        logger.warning("Database stamped to Alembic head successfully.")
