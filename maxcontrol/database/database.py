from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from maxcontrol.core.config import settings
import logging

logger = logging.getLogger(__name__)


def _engine_options(url: str) -> dict:
    # SQLite (desarrollo local) no acepta opciones de pool
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True, "pool_size": 10, "max_overflow": 20}


engine = create_engine(
    settings.database_url,
    echo=settings.DEBUG and settings.ENVIRONMENT != "test",
    **_engine_options(settings.database_url)
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """Genera una sesión de base de datos por request y la libera al terminar."""
    db = SessionLocal()
    try:
        yield db
    except Exception as e:
        logger.error(f"Database error: {e}")
        db.rollback()
        raise
    finally:
        db.close()
