"""
RoomLedger Backend — Household Service (Business Logic)
=========================================================

What:  Validation and household-scoped SQL for roommates and expenses.
Who:   Called by the /api route handlers; receives the request's session.
How:   Every statement is filtered by `household`; nothing here commits.
       The session dependency commits once per request, so the two-statement
       operations (rename + cascade, roommate upsert + expense insert) are
       atomic.

Operations:
    get_state()        SELECT roommates by name, expenses by id
    add_roommate()     INSERT ... ON CONFLICT (household, name) DO NOTHING
    rename_roommate()  UPDATE roommates; UPDATE expenses SET payer
    remove_roommate()  DELETE roommate (expenses keep the payer string)
    add_expense()      upsert payer as roommate; INSERT expense RETURNING id
    delete_expense()   DELETE expense WHERE household AND id

Validation rules (400 on failure, no statement executed):
    - names:  non-empty strings
    - amount: JSON number or numeric string, rounded half-up to cents,
              0 < amount < 10^10 (the range of NUMERIC(12, 2))
    - id:     integer (or integer string), zero rejected
"""

import json
import logging
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from roomledger.exceptions import DatabaseError, ValidationError
from roomledger.models import Expense, Roommate
from roomledger.schemas.household import (
    ExpenseAddRequest,
    ExpenseCreatedResponse,
    ExpenseDeleteRequest,
    ExpenseItem,
    OkResponse,
    RoommateNameRequest,
    RoommateRenameRequest,
    StateResponse,
)

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
# NUMERIC(12, 2) holds at most 10 integer digits
MAX_AMOUNT = Decimal("10000000000")
BIGINT_MAX = 2**63 - 1


# ══════════════════════════════════════════════════════════════════════════
# Input coercion
# ══════════════════════════════════════════════════════════════════════════


def clean_name(value: Any) -> Optional[str]:
    """
    Coerce a truthy client value to the text stored in a name column.

    None, "", False, 0 and empty containers count as missing and return
    None. Strings are kept as sent; numbers and booleans are stored the way
    they appear in JSON (5 -> "5", 2.0 -> "2", True -> "true"); lists and
    objects as compact JSON.
    """
    if not value:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    return json.dumps(value, separators=(",", ":"))


def parse_amount(value: Any) -> Optional[Decimal]:
    """
    Coerce a client amount to a positive two-decimal Decimal.

    Accepts ints, floats and numeric strings. Booleans, NaN/Infinity,
    non-numeric strings and anything that rounds to <= 0.00 or does not fit
    NUMERIC(12, 2) return None.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        raw = str(value)
    elif isinstance(value, str):
        raw = value.strip()
    else:
        return None

    try:
        amount = Decimal(raw)
    except InvalidOperation:
        return None
    if not amount.is_finite() or amount <= 0 or amount >= MAX_AMOUNT:
        return None

    amount = amount.quantize(CENT, rounding=ROUND_HALF_UP)
    if amount <= 0 or amount >= MAX_AMOUNT:
        return None
    return amount


def parse_expense_id(value: Any) -> Optional[int]:
    """
    Coerce a client expense id to an int.

    Zero is rejected like a missing id; ids are generated from 1 upwards so
    no stored expense becomes undeletable.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        expense_id = value
    elif isinstance(value, float) and value.is_integer():
        expense_id = int(value)
    elif isinstance(value, str):
        try:
            expense_id = int(value.strip())
        except ValueError:
            return None
    else:
        return None
    return expense_id or None


class HouseholdService:
    """
    Business logic for one household's roommates and expenses.

    Stateless: the session and household id are passed to every call.

    Error Handling Strategy:
        Invalid input raises ValidationError before any SQL runs.
        SQLAlchemy failures are logged and re-raised as DatabaseError; the
        session dependency rolls the request transaction back.
    """

    # ── Reads ─────────────────────────────────────────────────────────────

    async def get_state(self, db: AsyncSession, household: str) -> StateResponse:
        """
        Full household snapshot: roommate names A→Z, expenses oldest first.

        No pagination; the whole history is returned every time.
        """
        try:
            names = await db.execute(
                select(Roommate.name)
                .where(Roommate.household == household)
                .order_by(Roommate.name.asc())
            )
            rows = await db.execute(
                select(Expense)
                .where(Expense.household == household)
                .order_by(Expense.id.asc())
            )
            roommates = list(names.scalars().all())
            expenses = [
                ExpenseItem(
                    id=expense.id,
                    payer=expense.payer,
                    name=expense.name,
                    amount=float(expense.amount),
                    created_at=expense.created_at,
                )
                for expense in rows.scalars().all()
            ]
        except SQLAlchemyError as e:
            raise self._database_error("get_state", household, e)

        return StateResponse(roommates=roommates, expenses=expenses)

    # ── Roommates ─────────────────────────────────────────────────────────

    async def add_roommate(
        self, db: AsyncSession, household: str, request: RoommateNameRequest
    ) -> OkResponse:
        """Insert a roommate; adding an existing name is a silent no-op."""
        name = clean_name(request.name)
        if name is None:
            raise ValidationError(message="name required", field="name")

        try:
            await self._insert_roommate(db, household, name)
        except SQLAlchemyError as e:
            raise self._database_error("add_roommate", household, e)

        logger.info("Roommate added: household=%s name=%s", household, name)
        return OkResponse()

    async def rename_roommate(
        self, db: AsyncSession, household: str, request: RoommateRenameRequest
    ) -> OkResponse:
        """
        Rename a roommate and move all of that roommate's expenses along.

        Both UPDATEs run even when no roommate row matches `oldName`.
        Renaming onto a name that already exists violates
        uq_roommates_household_name and fails the whole request.
        """
        old_name = clean_name(request.old_name)
        new_name = clean_name(request.new_name)
        if old_name is None or new_name is None:
            raise ValidationError(message="oldName/newName required", field="oldName")

        try:
            await db.execute(
                update(Roommate)
                .where(Roommate.household == household, Roommate.name == old_name)
                .values(name=new_name)
            )
            result = await db.execute(
                update(Expense)
                .where(Expense.household == household, Expense.payer == old_name)
                .values(payer=new_name)
            )
        except SQLAlchemyError as e:
            raise self._database_error(
                "rename_roommate", household, e, old_name=old_name, new_name=new_name
            )

        logger.info(
            "Roommate renamed: household=%s %s -> %s (%s expenses)",
            household, old_name, new_name, result.rowcount,
        )
        return OkResponse()

    async def remove_roommate(
        self, db: AsyncSession, household: str, request: RoommateNameRequest
    ) -> OkResponse:
        """Delete a roommate. Expenses paid by them are left as they are."""
        name = clean_name(request.name)
        if name is None:
            raise ValidationError(message="name required", field="name")

        try:
            await db.execute(
                delete(Roommate).where(
                    Roommate.household == household, Roommate.name == name
                )
            )
        except SQLAlchemyError as e:
            raise self._database_error("remove_roommate", household, e, name=name)

        logger.info("Roommate removed: household=%s name=%s", household, name)
        return OkResponse()

    # ── Expenses ──────────────────────────────────────────────────────────

    async def add_expense(
        self, db: AsyncSession, household: str, request: ExpenseAddRequest
    ) -> ExpenseCreatedResponse:
        """
        Record an expense, registering the payer as a roommate if needed.

        Every payer therefore shows up in the roommate list, even one that
        was never added explicitly.
        """
        payer = clean_name(request.payer)
        name = clean_name(request.name)
        amount = parse_amount(request.amount)
        if payer is None or name is None or amount is None:
            raise ValidationError(
                message="invalid expense",
                context={"payer": request.payer, "name": request.name, "amount": request.amount},
            )

        try:
            await self._insert_roommate(db, household, payer)
            expense = Expense(household=household, payer=payer, name=name, amount=amount)
            db.add(expense)
            await db.flush()  # Assigns the generated id
        except SQLAlchemyError as e:
            raise self._database_error("add_expense", household, e, payer=payer)

        logger.info(
            "Expense %s added: household=%s payer=%s amount=%s",
            expense.id, household, payer, amount,
        )
        return ExpenseCreatedResponse(id=expense.id)

    async def delete_expense(
        self, db: AsyncSession, household: str, request: ExpenseDeleteRequest
    ) -> OkResponse:
        """Delete one expense of this household; unknown ids are a no-op."""
        expense_id = parse_expense_id(request.id)
        if expense_id is None:
            raise ValidationError(message="id required", field="id")

        # Outside BIGINT no row can match; the driver would reject the parameter
        if abs(expense_id) > BIGINT_MAX:
            logger.info("Expense delete skipped, id out of range: household=%s", household)
            return OkResponse()

        try:
            result = await db.execute(
                delete(Expense).where(
                    Expense.household == household, Expense.id == expense_id
                )
            )
        except SQLAlchemyError as e:
            raise self._database_error("delete_expense", household, e, id=expense_id)

        logger.info(
            "Expense delete: household=%s id=%s removed=%s",
            household, expense_id, result.rowcount,
        )
        return OkResponse()

    # ── Helpers ───────────────────────────────────────────────────────────

    @staticmethod
    async def _insert_roommate(db: AsyncSession, household: str, name: str) -> None:
        """INSERT ... ON CONFLICT (household, name) DO NOTHING, per dialect."""
        dialect = db.get_bind().dialect.name
        insert = sqlite_insert if dialect == "sqlite" else pg_insert
        await db.execute(
            insert(Roommate)
            .values(household=household, name=name)
            .on_conflict_do_nothing(index_elements=["household", "name"])
        )

    @staticmethod
    def _database_error(
        operation: str, household: str, error: Exception, **context: Any
    ) -> DatabaseError:
        logger.error(
            "Database error in %s (household=%s): %s",
            operation, household, str(error),
            exc_info=True,
        )
        return DatabaseError(
            context={
                "operation": operation,
                "household": household,
                "error_type": type(error).__name__,
                **context,
            },
        )


# ── Singleton Instance ────────────────────────────────────────────────────
household_service = HouseholdService()
