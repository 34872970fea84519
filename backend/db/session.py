from typing import Generator

from sqlmodel import Session, SQLModel, create_engine
from sqlalchemy.orm import sessionmaker

from core.config import settings

# Websocket handlers run on other threads than the one that opened the connection
engine = create_engine(
    settings.SQLALCHEMY_DATABASE_URI,
    connect_args={"check_same_thread": False},
)  # type: ignore

SessionLocal = sessionmaker(bind=engine, class_=Session, autocommit=False, autoflush=False)


def create_db_and_tables() -> None:
    import models  # noqa: F401

    SQLModel.metadata.create_all(engine)


def get_db() -> Generator[Session, None, None]:
    with SessionLocal() as session:
        yield session
