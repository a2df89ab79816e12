from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy import create_engine

from bloodreport.config import DATABASE_URL, SQL_ECHO

_engine_kwargs = {"echo": SQL_ECHO, "future": True, "pool_pre_ping": True}
if DATABASE_URL.startswith("sqlite"):
    _engine_kwargs["connect_args"] = {"check_same_thread": False}

engine = create_engine(DATABASE_URL, **_engine_kwargs)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
