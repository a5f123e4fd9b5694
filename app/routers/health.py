"""Health check router."""

import logging
from pathlib import Path
from typing import Optional

from alembic.config import Config
from alembic.script import ScriptDirectory
from alembic.util import CommandError
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db

logger = logging.getLogger(__name__)

router = APIRouter()

PROJECT_ROOT = Path(__file__).resolve().parents[2]


def migration_head() -> Optional[str]:
    """Newest revision shipped in alembic/, or None when not packaged."""
    cfg_path = PROJECT_ROOT / "alembic.ini"
    script_location = PROJECT_ROOT / "alembic"
    if not cfg_path.exists() or not script_location.exists():
        return None

    config = Config(str(cfg_path))
    config.set_main_option("script_location", str(script_location))
    try:
        return ScriptDirectory.from_config(config).get_current_head()
    except CommandError as exc:
        logger.warning("Could not read migration head: %s", exc)
        return None


@router.get("/health")
async def health_check(db: AsyncSession = Depends(get_db)):
    """DB ping plus whether the database is on the latest migration."""
    db_ok = False
    current: Optional[str] = None

    try:
        await db.execute(text("SELECT 1"))
        db_ok = True
    except SQLAlchemyError as exc:
        logger.error("Health check database ping failed: %s", exc)

    if db_ok:
        try:
            async with db.begin_nested():
                result = await db.execute(text("SELECT version_num FROM alembic_version"))
                current = result.scalar_one_or_none()
        except SQLAlchemyError:
            current = None

    head = migration_head()
    return {
        "api_ok": True,
        "db_ok": db_ok,
        "alembic_head_ok": bool(current and head and current == head),
        "alembic_current": current,
        "alembic_head": head,
    }
