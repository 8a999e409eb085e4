# 📄 File: migrations/env.py
# 🧭 Purpose (Layman Explanation):
# Tells Alembic how to reach the marketplace database and which tables it should know
# about, so schema changes can be applied safely in every environment.
# 🧪 Purpose (Technical Summary):
# Alembic environment: loads .env, imports every module's ORM models into the shared
# metadata and runs migrations over the async engine (asyncpg) or offline as SQL.
# 🔗 Dependencies:
# - alembic (migration tool)
# - SQLAlchemy async engine
# - python-dotenv (environment variables)
# 🔄 Connected Modules / Calls From:
# - alembic CLI commands (upgrade, downgrade, revision)

import asyncio
from logging.config import fileConfig

from alembic import context
from dotenv import load_dotenv
from sqlalchemy import pool
from sqlalchemy.ext.asyncio import create_async_engine

load_dotenv()

from sprout.shared.config.settings import get_settings  # noqa: E402
from sprout.shared.infrastructure.database.connection import Base  # noqa: E402

# Import all module models so they register on Base.metadata
from sprout.modules.user_management.infrastructure.database import models as user_models  # noqa: E402,F401
from sprout.modules.plant_listings.infrastructure.database import models as listing_models  # noqa: E402,F401
from sprout.modules.rewards.infrastructure.database import models as reward_models  # noqa: E402,F401
from sprout.modules.notifications.infrastructure.database import models as notification_models  # noqa: E402,F401
from sprout.modules.commerce.infrastructure.database import models as commerce_models  # noqa: E402,F401
from sprout.modules.messaging.infrastructure.database import models as messaging_models  # noqa: E402,F401
from sprout.modules.community.infrastructure.database import models as community_models  # noqa: E402,F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

exclude_tables = config.get_main_option("exclude_tables", "")


def get_database_url() -> str:
    return get_settings().database_url


def include_object(object, name, type_, reflected, compare_to):
    """Skip Supabase-managed schemas and any tables listed in exclude_tables."""
    if getattr(object, "schema", None) in ["auth", "storage", "realtime", "vault", "extensions"]:
        return False

    if type_ == "table" and name in exclude_tables.split(","):
        return False

    return True


def run_migrations_offline() -> None:
    """
    Run migrations in 'offline' mode.

    Emits SQL to the script output instead of executing it.
    """
    context.configure(
        url=get_database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
        include_object=include_object,
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        compare_type=True,
        compare_server_default=True,
        include_object=include_object,
        render_as_batch=connection.dialect.name == "sqlite",
    )

    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    connectable = create_async_engine(get_database_url(), poolclass=pool.NullPool)

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


def run_migrations_online() -> None:
    asyncio.run(run_async_migrations())


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
