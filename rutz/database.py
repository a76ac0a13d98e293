# rutz/database.py
# ------------------------------------------------------------
# SQLAlchemy setup for the storefront database
# - DATABASE_URL wins when set (tests point it at SQLite)
# - otherwise the PostgreSQL URL is assembled from DB_* env vars
# - Table creation and seeding happen in DatabaseStorage.initialize()
# ------------------------------------------------------------
from sqlalchemy import create_engine
from sqlalchemy.engine import URL
from sqlalchemy.orm import declarative_base, sessionmaker
from decouple import config

DATABASE_URL = config("DATABASE_URL", default="")
DB_USER = config("DB_USER", default="postgres")
DB_PASSWORD = config("DB_PASSWORD", default="")
DB_HOST = config("DB_HOST", default="localhost")
DB_PORT = int(config("DB_PORT", default=5432))
DB_NAME = config("DB_NAME", default="rutz")
DB_ECHO = config("DB_ECHO", cast=bool, default=False)

Base = declarative_base()


def database_url():
    if DATABASE_URL:
        return DATABASE_URL
    return URL.create(
        drivername="postgresql+psycopg2",
        username=DB_USER,
        password=DB_PASSWORD,
        host=DB_HOST,
        port=DB_PORT,
        database=DB_NAME,
    )


def make_engine(url=None, **kwargs):
    """Engine for `url` (defaults to the configured database)."""
    return create_engine(url or database_url(), echo=DB_ECHO, pool_pre_ping=True, **kwargs)


def make_session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)
