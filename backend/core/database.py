from sqlmodel import SQLModel, Session, create_engine
from core.config import DATABASE_URL

# SQLite connections are handed across FastAPI's threadpool
connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(DATABASE_URL, connect_args=connect_args)


def create_db_and_tables():
    # Register every table on SQLModel.metadata before create_all
    import models  # noqa: F401

    SQLModel.metadata.create_all(engine)


def get_session():
    with Session(engine) as session:
        yield session
