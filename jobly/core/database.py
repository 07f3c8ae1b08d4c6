import re
from typing import Any, Dict, List, Sequence

from sqlalchemy import create_engine, text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy.orm import Session, sessionmaker
from jobly.core.config import settings

# Create SQLAlchemy engine
engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,  # Verify connections before using them
    pool_size=10,
    max_overflow=20
)

# Create SessionLocal class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Create Base class for models
Base = declarative_base()

# $1, $2, ... in query templates
_POSITIONAL_PARAM = re.compile(r"\$(\d+)")


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


def query(db: Session, sql: str, args: Sequence[Any] = ()) -> List[Dict[str, Any]]:
    """
    Execute a parameterized query and return its rows as dicts.

    The template uses positional placeholders ($1, $2, ...) which are bound
    to ``args`` in order. Values are always sent as bind parameters, never
    interpolated into the SQL text.

    Args:
        db: Database session
        sql: Query template with $n placeholders
        args: Positional values; args[0] binds to $1

    Returns:
        List of row mappings (empty for statements returning no rows)
    """
    bound_sql = _POSITIONAL_PARAM.sub(lambda m: f":p{m.group(1)}", sql)
    params = {f"p{position}": value for position, value in enumerate(args, start=1)}

    result = db.execute(text(bound_sql), params)
    if not result.returns_rows:
        return []
    return [dict(row) for row in result.mappings()]


def init_db():
    """
    Initialize database.

    Tables are created by Alembic ("alembic upgrade head"); this only
    imports the models so they are registered on Base.metadata.
    """
    from jobly.models import company, job, user  # noqa: F401


def integrity_error_detail(exc: IntegrityError) -> str:
    """First line of the driver's message for a failed constraint."""
    lines = str(exc.orig).strip().splitlines()
    return lines[0] if lines else "constraint violated"
