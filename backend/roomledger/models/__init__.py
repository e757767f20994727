"""
RoomLedger Backend — ORM Models
================================

Tables:
    - roommates: household members, unique per (household, name)
    - expenses:  payments attributed to a payer within a household

Importing this package registers both tables on Base.metadata, which
init_schema() and Alembic rely on.
"""

from roomledger.models.expense import Expense
from roomledger.models.roommate import Roommate

__all__ = ["Expense", "Roommate"]
