from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from landcost.config import settings

DATABASE_URL = settings.database_url

_connect_args = (
    {"check_same_thread": False}  # SQLite with FastAPI threads
    if DATABASE_URL.startswith("sqlite")
    else {}
)

engine = create_engine(DATABASE_URL, connect_args=_connect_args)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
