import os

from dotenv import load_dotenv
from peewee import SqliteDatabase
from playhouse.db_url import connect

load_dotenv()

# Default to SQLite
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///tasks.db")


def casefold(value):
    return value.casefold() if value is not None else None


def create_database(url: str):
    params = {}
    if url.startswith("sqlite") and ":memory:" in url:
        # Una sola conexion para todos los hilos, si no cada hilo del pool
        # abriria su propia BDD en memoria (vacia).
        params = {"thread_safe": False, "check_same_thread": False}

    database = connect(url, **params)
    if isinstance(database, SqliteDatabase):
        # LIKE/lower() de SQLite solo pliegan ASCII.
        database.register_function(casefold, "casefold", 1)
    return database


# Initialize the database connection
db = create_database(DATABASE_URL)


def get_db():
    return db


def is_sqlite(database) -> bool:
    return isinstance(database, SqliteDatabase)
