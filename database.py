import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from core.config import DATABASE_URL, DB_ECHO

logger = logging.getLogger(__name__)

# ---------------- SQLAlchemy setup ----------------
connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(
    DATABASE_URL,
    echo=DB_ECHO,
    pool_pre_ping=True,
    connect_args=connect_args,
)
# autoflush keeps pending changes visible to queries inside the same unit of work
SessionLocal = sessionmaker(autocommit=False, autoflush=True, bind=engine)
Base = declarative_base()


def init_db(bind=None):
    """Create all tables. Models must be imported before this runs."""
    import model.appointment_model  # noqa: F401 - registers all mapped classes

    Base.metadata.create_all(bind=bind or engine, checkfirst=True)
    logger.info("Database tables ready")
