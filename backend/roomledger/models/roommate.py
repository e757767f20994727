"""
RoomLedger Backend — Roommate SQLAlchemy Model
================================================

What:  ORM model representing the `roommates` table.
Who:   Used by HouseholdService for the member list and by init_schema/Alembic.

Table Design Rationale:
    - household + name: the pair is the natural key; the unique constraint is
      what makes "add the same roommate twice" a no-op (ON CONFLICT DO NOTHING)
    - id: surrogate key, never exposed through the API
    - No foreign key from expenses.payer: removing a roommate must leave the
      payer string on historical expenses
"""

from sqlalchemy import BigInteger, Integer, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from roomledger.database import Base

# BIGSERIAL on Postgres; SQLite only autoincrements INTEGER PRIMARY KEY
BigIntId = BigInteger().with_variant(Integer(), "sqlite")


class Roommate(Base):
    """
    A named participant within a household.

    Lifecycle:
        1. Inserted by roommate-add, or implicitly by the first expense-add
           naming an unknown payer
        2. Renamed in place by roommate-rename (expenses follow)
        3. Deleted by roommate-remove (expenses stay)
    """

    __tablename__ = "roommates"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)

    household: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Household partition key",
    )

    name: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Display name, unique within the household",
    )

    __table_args__ = (
        UniqueConstraint("household", "name", name="uq_roommates_household_name"),
    )

    def __repr__(self) -> str:
        return f"<Roommate(household='{self.household}', name='{self.name}')>"
