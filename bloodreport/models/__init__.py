# bloodreport/models/__init__.py
from bloodreport.db.session import Base, engine

# Import model modules so SQLAlchemy registers all mappers.
from . import blood_test  # noqa: F401


def init_db() -> None:
    """Create tables if they don't exist."""
    Base.metadata.create_all(bind=engine)
