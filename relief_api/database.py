from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

from relief_api import config

DATABASE_URL = config.SQLALCHEMY_DATABASE_URL


def _engine_options(url: str) -> dict:
    if not url.startswith("sqlite"):
        return {"pool_pre_ping": True, "pool_recycle": 3600}
    options = {"connect_args": {"check_same_thread": False}}
    # in-memory databases live as long as their single connection
    if url in ("sqlite://", "sqlite:///:memory:"):
        options["poolclass"] = StaticPool
    return options


engine = create_engine(DATABASE_URL, **_engine_options(DATABASE_URL))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    # models must be imported so their tables register on Base.metadata
    from relief_api import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
