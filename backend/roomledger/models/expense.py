"""
RoomLedger Backend — Expense SQLAlchemy Model
===============================================

What:  ORM model representing the `expenses` table.
Who:   Used by HouseholdService for state listing, insert, delete and the
       payer cascade on roommate rename.

Table Design Rationale:
    - id: auto-incrementing; ascending id is creation order, which is the
      order the state endpoint returns
    - amount NUMERIC(12, 2): exact cents in storage; only the API response
      converts it to a float
    - amount > 0 is checked by the service, not by a CHECK constraint
    - created_at: server-side default so every writer stamps the same clock

    Index on (household, id):
        Every read filters by household and orders by id.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Index, Numeric, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from roomledger.database import Base
from roomledger.models.roommate import BigIntId


class Expense(Base):
    """
    A monetary record attributed to a payer within a household.

    Immutable after insert except `payer`, which roommate-rename rewrites.
    """

    __tablename__ = "expenses"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)

    household: Mapped[str] = mapped_column(Text, nullable=False)

    # Plain text, not a foreign key: survives roommate removal
    payer: Mapped[str] = mapped_column(Text, nullable=False)

    name: Mapped[str] = mapped_column(Text, nullable=False)

    amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2, asdecimal=True),
        nullable=False,
        comment="Strictly positive, two decimal places",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=text("CURRENT_TIMESTAMP"),
        comment="Insertion time (UTC)",
    )

    __table_args__ = (
        Index("idx_expenses_household_id", "household", "id"),
    )

    def __repr__(self) -> str:
        return (
            f"<Expense(id={self.id}, household='{self.household}', "
            f"payer='{self.payer}', amount={self.amount})>"
        )
