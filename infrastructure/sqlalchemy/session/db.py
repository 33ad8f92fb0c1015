import os

from dotenv import load_dotenv
from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///tasks.db")


def _engine_kwargs(url: str) -> dict:
    if not url.startswith("sqlite"):
        return {"pool_pre_ping": True}
    kwargs: dict = {"connect_args": {"check_same_thread": False}}
    if ":memory:" in url:
        # Una sola conexion compartida, si no cada hilo veria una BDD vacia.
        kwargs["poolclass"] = StaticPool
    return kwargs


engine = create_engine(DATABASE_URL, **_engine_kwargs(DATABASE_URL))
IS_SQLITE = engine.dialect.name == "sqlite"


def _casefold(value):
    return value.casefold() if value is not None else None


if IS_SQLITE:

    @event.listens_for(engine, "connect")
    def _register_functions(dbapi_connection, connection_record):
        # lower() de SQLite solo pliega ASCII.
        dbapi_connection.create_function("casefold", 1, _casefold, deterministic=True)


SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
Base = declarative_base()


def get_session():
    return SessionLocal()


def init_db() -> None:
    # Importa los modelos para registrarlos en Base.metadata.
    from infrastructure.sqlalchemy.model import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
