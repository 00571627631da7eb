from __future__ import annotations
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base
from .settings import settings


# Student settings and practice history live here
DATABASE_URL = settings.database_url or "sqlite:///./lingua.db"

_connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(DATABASE_URL, connect_args=_connect_args, future=True)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, future=True)
Base = declarative_base()


def init_db(bind: Engine | None = None) -> None:
	from . import models  # noqa: F401  (registers tables)
	Base.metadata.create_all(bind=bind or engine)


def get_db():
	db = SessionLocal()
	try:
		yield db
	finally:
		db.close()
