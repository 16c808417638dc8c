# database.py
import logging

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from jobboard.config import build_sqlalchemy_db_url, settings


logger = logging.getLogger(__name__)


def _build_connect_args(db_url: str) -> dict:
    if db_url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


def mask_db_url(db_url: str) -> str:
    try:
        return str(make_url(db_url).set(password="***"))
    except Exception:
        return db_url


def build_engine(db_url: str) -> Engine:
    kwargs: dict = {"pool_pre_ping": True, "future": True, "connect_args": _build_connect_args(db_url)}
    # In-memory sqlite must share one connection, or every pool checkout sees an empty db.
    if db_url in ("sqlite://", "sqlite:///:memory:"):
        kwargs["poolclass"] = StaticPool
    return create_engine(db_url, **kwargs)


_db_url = build_sqlalchemy_db_url(settings)
engine = build_engine(_db_url)
logger.info("database.engine db_url=%s", mask_db_url(_db_url))
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, future=True)
Base = declarative_base()
