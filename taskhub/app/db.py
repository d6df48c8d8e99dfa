from sqlalchemy import create_engine, inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from taskhub.app.config import get_settings


def build_engine(database_url: str) -> Engine:
    # SQLite requires check_same_thread=False for usage across threads
    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
    return create_engine(database_url, connect_args=connect_args, pool_pre_ping=True)


engine = build_engine(get_settings().database_url)
# Rows returned by the repository are serialized after commit; keep their loaded state
SessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)

Base = declarative_base()


def init_db(bind: Engine) -> None:
    """Create the tasks table if it does not exist yet (idempotent)."""

    from taskhub.app import models  # noqa: F401  registers the mapping

    Base.metadata.create_all(bind=bind)


def database_ready(bind: Engine) -> bool:
    try:
        with bind.connect() as conn:
            conn.execute(text("SELECT 1"))
            return inspect(conn).has_table("tasks")
    except Exception:
        return False


def get_db():
    db: Session = SessionLocal()
    try:
        yield db
    finally:
        db.close()
