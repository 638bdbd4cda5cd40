"""Alembic environment for the finance tracker SQLite database.

Invoked programmatically from ``finance_tracker.database.init_db``, which
passes the URL through the Alembic config. Without one, ``FINANCE_TRACKER_DB``
selects the database file.
"""

import os

from sqlalchemy import create_engine, pool

from alembic import context


def get_url() -> str:
    """Resolve the database URL from context or environment."""
    url = context.config.get_main_option("sqlalchemy.url")
    if url:
        return url
    return f"sqlite:///{os.environ.get('FINANCE_TRACKER_DB', 'data/finance.db')}"


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode (emit SQL without a live connection)."""
    context.configure(
        url=get_url(),
        target_metadata=None,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode (with a live database connection)."""
    connectable = create_engine(get_url(), poolclass=pool.NullPool)

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=None,
            render_as_batch=True,
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
