from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
import importlib.util
from guardquote.core.config import settings

# Postgres in deployments. Without DATABASE_URL we fall back to a local SQLite file
# so the app and the test-suite can run without a database server.
SQLALCHEMY_DATABASE_URL = settings.database_url or "sqlite:///./guardquote.db"

# If the provided URL is the plain 'postgresql://' (or legacy 'postgres://') SQLAlchemy
# will try to load the default driver (psycopg2). We only depend on 'psycopg' v3
# (psycopg[binary]), so the URL is adjusted to use that driver if psycopg2 is absent.
psycopg2_present = importlib.util.find_spec("psycopg2") is not None

if not psycopg2_present and SQLALCHEMY_DATABASE_URL.startswith(("postgres://", "postgresql://")) and "+psycopg" not in SQLALCHEMY_DATABASE_URL:
    # Normalize legacy prefix 'postgres://' -> 'postgresql://'
    if SQLALCHEMY_DATABASE_URL.startswith("postgres://"):
        SQLALCHEMY_DATABASE_URL = "postgresql://" + SQLALCHEMY_DATABASE_URL[len("postgres://"):]
    SQLALCHEMY_DATABASE_URL = SQLALCHEMY_DATABASE_URL.replace("postgresql://", "postgresql+psycopg://", 1)

IS_SQLITE = SQLALCHEMY_DATABASE_URL.startswith("sqlite")

engine_kwargs: dict = {"pool_pre_ping": not IS_SQLITE}
if IS_SQLITE:
    engine_kwargs["connect_args"] = {"check_same_thread": False}
    if SQLALCHEMY_DATABASE_URL in ("sqlite://", "sqlite:///:memory:"):
        # one shared connection, otherwise every checkout sees a fresh empty database
        engine_kwargs["poolclass"] = StaticPool

engine = create_engine(SQLALCHEMY_DATABASE_URL, **engine_kwargs)

if IS_SQLITE:
    @event.listens_for(engine, "connect")
    def _enable_sqlite_foreign_keys(dbapi_connection, _record):
        # ON DELETE CASCADE from users -> quotes is off in SQLite unless asked for
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
