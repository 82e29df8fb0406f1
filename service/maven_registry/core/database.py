# service/maven_registry/core/database.py
import os
from contextlib import contextmanager

from loguru import logger
from sqlalchemy import create_engine, text
from sqlalchemy.exc import OperationalError, TimeoutError as PoolTimeoutError
from sqlalchemy.orm import sessionmaker

from ..core.config import get_settings
from ..core.errors import StoreUnavailableError
from ..domain.db_models import Base

_engine = None
_SessionLocal = None


def get_engine():
    """Get or create database engine"""
    global _engine
    if _engine is None:
        settings = get_settings()
        if settings.DB_URL.startswith("sqlite"):
            # Ensure directory exists for SQLite
            db_path = settings.DB_URL.replace("sqlite:///", "")
            os.makedirs(os.path.dirname(db_path) if os.path.dirname(db_path) else ".", exist_ok=True)
            _engine = create_engine(
                settings.DB_URL,
                connect_args={"check_same_thread": False, "timeout": settings.DB_TIMEOUT_S},
            )
        else:
            _engine = create_engine(
                settings.DB_URL,
                pool_pre_ping=True,
                pool_timeout=settings.DB_TIMEOUT_S,
            )
    return _engine


def get_session_local():
    """Get or create session factory"""
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=get_engine())
    return _SessionLocal


def init_db():
    """Initialize database tables"""
    engine = get_engine()
    Base.metadata.create_all(bind=engine)


def reset_engine():
    """Dispose the engine so the next call rebuilds it from current settings."""
    global _engine, _SessionLocal
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _SessionLocal = None


@contextmanager
def get_db():
    """Database session context manager"""
    SessionLocal = get_session_local()
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except (OperationalError, PoolTimeoutError) as e:
        session.rollback()
        logger.error("Database unavailable: {}", e)
        raise StoreUnavailableError("Database unavailable") from e
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def ping() -> bool:
    """Cheap round trip used by the health endpoint."""
    try:
        with get_db() as session:
            session.execute(text("SELECT 1"))
        return True
    except StoreUnavailableError:
        return False
