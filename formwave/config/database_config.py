from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from formwave.config.env_config import settings
from formwave.utils.logger_utils import log_info

DATABASE_URL = settings.database_url

if DATABASE_URL.startswith("sqlite"):
    # One shared in-process connection so every session sees the same database
    engine = create_engine(
        DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
else:
    engine = create_engine(
        DATABASE_URL,
        pool_pre_ping=True
    )

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

log_info(context="DATABASE", message=f"Database engine created for {engine.url.get_backend_name()}")


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
