from sqlalchemy import create_engine, text
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import StaticPool
from sqlalchemy.exc import SQLAlchemyError
from src.config import settings
from src.logging_config import get_logger

logger = get_logger(__name__)

def _engine_options(url: str) -> dict:
    """SQLite needs cross-thread access; in-memory SQLite also needs a single shared connection"""
    if not url.startswith("sqlite"):
        return {"pool_pre_ping": True}
    options = {"connect_args": {"check_same_thread": False}}
    if url in ("sqlite://", "sqlite:///:memory:"):
        options["poolclass"] = StaticPool
    return options

engine = create_engine(settings.STORE_URL, **_engine_options(settings.STORE_URL))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()

def get_db():
    """Yield a session scoped to one request"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def ping(db: Session) -> bool:
    """Check that the store answers a trivial query"""
    try:
        db.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError as e:
        logger.warning("Store ping failed", extra={"error": str(e)})
        return False
