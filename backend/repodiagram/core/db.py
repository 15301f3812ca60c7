from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine

from repodiagram.core.config import settings


def build_engine(database_uri: str | None = None) -> Engine:
    uri = database_uri or settings.SQLALCHEMY_DATABASE_URI
    connect_args = {"check_same_thread": False} if uri.startswith("sqlite") else {}
    return create_engine(uri, connect_args=connect_args)


engine = build_engine()


def init_db(db_engine: Engine = engine) -> None:
    # Tables are registered on SQLModel.metadata when the models module is imported.
    import repodiagram.models  # noqa: F401

    SQLModel.metadata.create_all(db_engine)
