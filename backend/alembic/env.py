from logging.config import fileConfig
from sqlalchemy import engine_from_config, pool
from alembic import context
import logging
import sys
from pathlib import Path

# Ensure the project root (which contains the 'guardquote' package) is on sys.path even
# if Alembic is executed with CWD set to the 'alembic' directory inside the container.
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# this is the Alembic Config object, which provides
# access to the values within the .ini file in use.
config = context.config

# Interpret the config file for Python logging.
if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)
logger = logging.getLogger("alembic.env")

# Add current app models metadata
from guardquote.models.base import Base  # noqa: E402
from guardquote.models import user, quote  # noqa: F401,E402
from guardquote.db.session import SQLALCHEMY_DATABASE_URL  # noqa: E402

target_metadata = Base.metadata

# Same URL resolution as the app (DATABASE_URL, psycopg driver, SQLite fallback)
DB_URL = SQLALCHEMY_DATABASE_URL
logger.info("Running migrations against %s", DB_URL.split("@")[-1])


def run_migrations_offline():
    context.configure(
        url=DB_URL,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    connectable = engine_from_config(
        {"sqlalchemy.url": DB_URL},
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=connection.dialect.name == "sqlite",
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
