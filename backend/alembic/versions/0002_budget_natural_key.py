"""Unique (category, month) on budgets + transaction query indexes

Revision ID: 0002
Revises: 0001
Create Date: 2026-02-01 00:00:00.000000
"""

from typing import Sequence, Union

from alembic import op

revision: str = "0002"
down_revision: Union[str, None] = "0001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Collapse duplicate (category, month) rows, keeping the most recent one
    op.execute(
        "DELETE FROM budgets WHERE id NOT IN ("
        "SELECT MAX(id) FROM budgets GROUP BY category, month)"
    )
    with op.batch_alter_table("budgets", schema=None) as batch_op:
        batch_op.create_unique_constraint("uq_budgets_category_month", ["category", "month"])

    op.create_index(
        "ix_transactions_date_created", "transactions", ["date", "created_at"], unique=False
    )
    op.create_index(
        "ix_transactions_type_category", "transactions", ["type", "category"], unique=False
    )


def downgrade() -> None:
    op.drop_index("ix_transactions_type_category", table_name="transactions")
    op.drop_index("ix_transactions_date_created", table_name="transactions")
    with op.batch_alter_table("budgets", schema=None) as batch_op:
        batch_op.drop_constraint("uq_budgets_category_month", type_="unique")
