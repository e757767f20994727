"""Create roommates and expenses tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Initial schema: household members and their expenses.
How:   Mirrors roomledger/models; the app's startup bootstrap creates the
       same tables with CREATE TABLE IF NOT EXISTS.

Rollback: downgrade() drops both tables (destructive — all data lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_id_type = sa.BigInteger().with_variant(sa.Integer(), "sqlite")


def upgrade() -> None:
    op.create_table(
        "roommates",
        sa.Column("id", _id_type, autoincrement=True, nullable=False),
        sa.Column("household", sa.Text(), nullable=False, comment="Household partition key"),
        sa.Column(
            "name",
            sa.Text(),
            nullable=False,
            comment="Display name, unique within the household",
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("household", "name", name="uq_roommates_household_name"),
    )

    op.create_table(
        "expenses",
        sa.Column("id", _id_type, autoincrement=True, nullable=False),
        sa.Column("household", sa.Text(), nullable=False),
        # Not a foreign key: expenses outlive the roommate that paid
        sa.Column("payer", sa.Text(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column(
            "amount",
            sa.Numeric(12, 2),
            nullable=False,
            comment="Strictly positive, two decimal places",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="Insertion time (UTC)",
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    # Every read filters by household and orders by id
    op.create_index("idx_expenses_household_id", "expenses", ["household", "id"])


def downgrade() -> None:
    op.drop_index("idx_expenses_household_id", table_name="expenses")
    op.drop_table("expenses")
    op.drop_table("roommates")
