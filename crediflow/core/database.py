"""
Storage for loan applications, repayments and notifications.
Repayment schedules are derived data and never reach these tables.
"""
from typing import Any, Iterator, List
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from crediflow.core.config import settings
from crediflow.core.logger import logger

IS_SQLITE = settings.DATABASE_URL.startswith("sqlite")

engine = create_engine(
    settings.DATABASE_URL,
    # Request handlers run in FastAPI's threadpool, so a connection may cross threads
    connect_args={"check_same_thread": False} if IS_SQLITE else {}
)

if IS_SQLITE:
    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection: Any, connection_record: Any) -> None:
        # Admin review writes must not block borrowers reading their schedules
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA synchronous=NORMAL")
        cursor.close()

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_enum_values(enum_cls: Any) -> List[str]:
    """Stores status enums by their lowercase wire value rather than the member name."""
    return [e.value for e in enum_cls]


def get_db() -> Iterator[Session]:
    """One session per request; services commit, this only closes."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """Creates the application, payment and notification tables if missing."""
    from crediflow.applications import models as _applications  # noqa: F401
    from crediflow.payments import models as _payments  # noqa: F401
    from crediflow.notifications import models as _notifications  # noqa: F401

    tables = sorted(Base.metadata.tables)
    logger.info(f"Ensuring tables: {', '.join(tables)}")
    Base.metadata.create_all(bind=engine)
    logger.info("Database ready")
