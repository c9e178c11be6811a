"""
Database engine, session handling and the positional-parameter query client.
"""

import logging
import re
from typing import Any, Dict, List, Sequence

from fastapi import Depends
from sqlalchemy import create_engine, text
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy.orm import Session, sessionmaker
from app.core.config import settings

logger = logging.getLogger(__name__)

# Create SQLAlchemy engine
engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,  # Verify connections before using them
)

# Create SessionLocal class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Create Base class for models
Base = declarative_base()

# $1, $2, ... positional placeholders
_PLACEHOLDER_RE = re.compile(r"\$(\d+)")


class DatabaseClient:
    """
    Thin query client over a SQLAlchemy session.

    Accepts SQL written with ``$1, $2, ...`` placeholders and a positional
    list of values, and returns rows as plain dictionaries keyed by column
    name (or alias). Values are always bound, never interpolated.

    Each statement is committed as soon as it has run; callers get
    statement-level atomicity only.
    """

    def __init__(self, session: Session):
        self.session = session

    def execute(self, sql: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        """
        Execute a statement and return its rows.

        Args:
            sql: SQL text using $n placeholders
            params: Values bound to $1..$n in order

        Returns:
            List of row dictionaries (empty for statements without rows)
        """
        bound_sql = _PLACEHOLDER_RE.sub(lambda m: f":p{m.group(1)}", sql)
        binds = {f"p{idx}": value for idx, value in enumerate(params, start=1)}

        logger.debug(f"Executing SQL: {' '.join(sql.split())} | params={len(binds)}")

        try:
            result = self.session.execute(text(bound_sql), binds)
            rows = [dict(row._mapping) for row in result] if result.returns_rows else []
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        return rows


def get_db():
    """
    Dependency function to get database session.
    Used in FastAPI endpoints with Depends(get_db)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_db_client(db: Session = Depends(get_db)) -> DatabaseClient:
    """Dependency wrapping the request session in a DatabaseClient."""
    return DatabaseClient(db)


def init_db():
    """
    Initialize database.

    Imports the models so they are registered on Base. Tables are only
    created when AUTO_CREATE_TABLES is enabled; otherwise the schema is
    expected to exist already.
    """
    from app.models import company, job  # noqa: F401  Import models to register them

    if settings.AUTO_CREATE_TABLES:
        Base.metadata.create_all(bind=engine)
