from sqlalchemy import create_engine
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy.orm import sessionmaker
from app.core.config import settings


def engine_options(database_url: str, timeout_seconds: float) -> dict:
    """
    Build create_engine() keyword arguments for the given backend.

    Every store call is bounded: PostgreSQL cancels statements after
    statement_timeout, SQLite gives up waiting on a locked database after
    its busy timeout. Both surface as OperationalError.
    """
    if database_url.startswith("sqlite"):
        return {
            "connect_args": {"check_same_thread": False, "timeout": timeout_seconds},
        }

    timeout_ms = int(timeout_seconds * 1000)
    return {
        "pool_pre_ping": True,  # Verify connections before using them
        "pool_size": 10,  # Connection pool size
        "max_overflow": 20,  # Allow up to 20 connections beyond pool_size
        "connect_args": {
            "options": f"-c statement_timeout={timeout_ms} -c lock_timeout={timeout_ms}",
            "connect_timeout": max(1, int(timeout_seconds)),
        },
    }


# Create SQLAlchemy engine
engine = create_engine(
    settings.DATABASE_URL,
    **engine_options(settings.DATABASE_URL, settings.STORE_TIMEOUT_SECONDS)
)

# Create SessionLocal class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Create Base class for models
Base = declarative_base()


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


def init_db():
    """
    Initialize database.

    Alembic owns the schema (see alembic/versions). Importing the models
    registers them on Base.metadata; tables are only created here when
    AUTO_CREATE_TABLES is enabled for local development.
    """
    from app.models import account, person, engagement, uploaded_file  # Import models to register them
    if settings.AUTO_CREATE_TABLES:
        Base.metadata.create_all(bind=engine)
