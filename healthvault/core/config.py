import os
from dotenv import load_dotenv
from sqlalchemy.engine import URL

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL")
DB_BACKEND = os.getenv("DB_BACKEND", "sqlite").lower()

# PostgreSQL
DB_HOST = os.getenv("DB_HOST", "localhost")
DB_PORT = int(os.getenv("DB_PORT", "5432"))
DB_NAME = os.getenv("DB_NAME", "healthvault")
DB_USER = os.getenv("DB_USER", "healthvault_user")
DB_PASSWORD = os.getenv("DB_PASSWORD")

# SQLite
SQLITE_PATH = os.getenv("SQLITE_PATH", "healthvault.db")

PORT = int(os.getenv("PORT", "3000"))
SEED_SAMPLE_DATA = os.getenv("SEED_SAMPLE_DATA", "true").lower() in ("1", "true", "yes")


def build_database_url(
    backend=DB_BACKEND,
    database_url=DATABASE_URL,
    host=DB_HOST,
    port=DB_PORT,
    name=DB_NAME,
    user=DB_USER,
    password=DB_PASSWORD,
    sqlite_path=SQLITE_PATH,
):
    """Return the SQLAlchemy URL for the configured store.

    An explicit DATABASE_URL always wins. Otherwise DB_BACKEND picks between
    the embedded SQLite file and a PostgreSQL server built from the DB_*
    variables.
    """
    if database_url:
        return database_url

    if backend in ("postgres", "postgresql"):
        return URL.create(
            "postgresql+psycopg2",
            username=user,
            password=password,
            host=host,
            port=port,
            database=name,
        )

    if backend == "sqlite":
        return URL.create("sqlite", database=sqlite_path)

    raise ValueError(f"Unknown DB_BACKEND: {backend!r} (expected 'sqlite' or 'postgres')")
