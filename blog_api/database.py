"""Database configuration and session management."""

import os
import logging
from sqlalchemy import create_engine, event, text
from sqlalchemy.orm import sessionmaker
from dotenv import load_dotenv

from blog_api.models import Base

# Load environment variables
load_dotenv()

# Configure logging
logger = logging.getLogger(__name__)

# Get database configuration from environment
DATABASE_URL = os.getenv("DATABASE_URL")

if not DATABASE_URL:
    raise ValueError("DATABASE_URL must be set in .env file")

connect_args = {}
if DATABASE_URL.startswith("sqlite"):
    connect_args["check_same_thread"] = False  # Needed for SQLite

# Create engine
engine = create_engine(
    DATABASE_URL,
    connect_args=connect_args,
    pool_pre_ping=True
)


def _unicode_lower(value):
    return value.lower() if value is not None else None


if DATABASE_URL.startswith("sqlite"):
    @event.listens_for(engine, "connect")
    def register_unicode_lower(dbapi_connection, connection_record):
        """Replace SQLite's ASCII-only lower() so ilike folds all of Unicode."""
        dbapi_connection.create_function("lower", 1, _unicode_lower, deterministic=True)


# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db():
    """
    Check the database connection and create all tables.

    Raises:
        SQLAlchemyError: If the database cannot be reached
    """
    logger.info("Connecting to database...")
    with engine.connect() as connection:
        connection.execute(text("SELECT 1"))
    logger.info("Initializing database tables...")
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created successfully")


def get_db():
    """
    Dependency function to get database session.

    Yields:
        Session: SQLAlchemy database session
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
