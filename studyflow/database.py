from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, declarative_base
from studyflow.config import DATABASE_URL


def make_engine(url: str):
    """Create an engine with the connection settings this app relies on.

    SQLite needs check_same_thread disabled (FastAPI runs sync handlers on a
    thread pool) and foreign keys switched on so ON DELETE CASCADE works.
    """
    is_sqlite = url.startswith("sqlite")
    connect_args = {"check_same_thread": False, "timeout": 30} if is_sqlite else {}

    # pool_pre_ping avoids stale connections on hosted databases
    engine = create_engine(url, connect_args=connect_args, pool_pre_ping=True)

    if is_sqlite:
        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_conn, _record):
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


engine = make_engine(DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
