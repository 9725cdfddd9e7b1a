"""
Alembic env - migrations run on a sync driver derived from the app's async URL.
"""

from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool
from sqlalchemy.engine import make_url

from product_api.config import get_settings
from product_api.db.base import Base
from product_api.db.models import Product, User  # noqa: F401 - register tables on Base.metadata

# Async driver -> sync driver Alembic can use
SYNC_DRIVERS = {
    "postgresql+asyncpg": "postgresql+psycopg2",
    "sqlite+aiosqlite": "sqlite+pysqlite",
}

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)


def migration_url(database_url: str) -> str:
    url = make_url(database_url)
    driver = SYNC_DRIVERS.get(url.drivername, url.drivername)
    return url.set(drivername=driver).render_as_string(hide_password=False)


config.set_main_option("sqlalchemy.url", migration_url(get_settings().database_url))
target_metadata = Base.metadata


def _configure_options(url: str) -> dict:
    # SQLite cannot ALTER constraints in place; batch mode rebuilds the table.
    return {
        "target_metadata": target_metadata,
        "compare_type": True,
        "render_as_batch": url.startswith("sqlite"),
    }


def run_migrations_offline() -> None:
    """Emit SQL to stdout without touching a database."""
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_configure_options(url),
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        context.configure(connection=connection, **_configure_options(str(connection.engine.url)))
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
