"""
RoomLedger Backend — Household Route Handlers
===============================================

What:  The /api surface: state query, liveness ping and five mutations.
How:   Resolves the household id from `?hid=` and the JSON body, then
       delegates to HouseholdService. Responses are plain JSON objects.

Request conventions:
    - `hid` missing or empty → household "default"
    - POST body that is not valid JSON, or not a JSON object, is read as {}
      so the endpoint answers with its own 400 message ("name required",
      "invalid expense", ...) rather than a framework error
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from roomledger.database import get_db_session
from roomledger.schemas.household import (
    ErrorResponse,
    ExpenseAddRequest,
    ExpenseCreatedResponse,
    ExpenseDeleteRequest,
    OkResponse,
    PingResponse,
    RoommateNameRequest,
    RoommateRenameRequest,
    StateResponse,
)
from roomledger.services.household_service import household_service

logger = logging.getLogger(__name__)

DEFAULT_HOUSEHOLD = "default"
PING_MESSAGE = "roomledger api is alive"

router = APIRouter(prefix="/api", tags=["Household"])

_BAD_REQUEST = {400: {"description": "Missing or invalid field", "model": ErrorResponse}}


# ── Dependencies ──────────────────────────────────────────────────────────

def household_id(
    hid: Optional[str] = Query(
        default=None,
        description="Household id. Omitted or empty selects the 'default' household.",
    ),
) -> str:
    return hid or DEFAULT_HOUSEHOLD


async def json_body(request: Request) -> Dict[str, Any]:
    """Request body as a dict; malformed or non-object JSON becomes {}."""
    try:
        payload = await request.json()
    except ValueError:
        logger.debug("Unreadable JSON body on %s", request.url.path)
        return {}
    return payload if isinstance(payload, dict) else {}


# ── Reads ─────────────────────────────────────────────────────────────────

@router.get(
    "/state",
    response_model=StateResponse,
    summary="Roommates and expenses of a household",
)
async def get_state(
    hid: str = Depends(household_id),
    db: AsyncSession = Depends(get_db_session),
) -> StateResponse:
    return await household_service.get_state(db, hid)


@router.get("", response_model=PingResponse, summary="Liveness check")
@router.get("/", response_model=PingResponse, include_in_schema=False)
@router.get("/ping", response_model=PingResponse, summary="Liveness check")
async def ping(hid: str = Depends(household_id)) -> PingResponse:
    """Answers without touching the database."""
    return PingResponse(hid=hid, message=PING_MESSAGE)


# ── Roommates ─────────────────────────────────────────────────────────────

@router.post(
    "/roommate-add",
    response_model=OkResponse,
    responses=_BAD_REQUEST,
    summary="Add a roommate (no-op if already present)",
)
async def roommate_add(
    hid: str = Depends(household_id),
    body: Dict[str, Any] = Depends(json_body),
    db: AsyncSession = Depends(get_db_session),
) -> OkResponse:
    request = RoommateNameRequest.model_validate(body)
    return await household_service.add_roommate(db, hid, request)


@router.post(
    "/roommate-rename",
    response_model=OkResponse,
    responses=_BAD_REQUEST,
    summary="Rename a roommate and the payer of their expenses",
)
async def roommate_rename(
    hid: str = Depends(household_id),
    body: Dict[str, Any] = Depends(json_body),
    db: AsyncSession = Depends(get_db_session),
) -> OkResponse:
    request = RoommateRenameRequest.model_validate(body)
    return await household_service.rename_roommate(db, hid, request)


@router.post(
    "/roommate-remove",
    response_model=OkResponse,
    responses=_BAD_REQUEST,
    summary="Remove a roommate (their expenses are kept)",
)
async def roommate_remove(
    hid: str = Depends(household_id),
    body: Dict[str, Any] = Depends(json_body),
    db: AsyncSession = Depends(get_db_session),
) -> OkResponse:
    request = RoommateNameRequest.model_validate(body)
    return await household_service.remove_roommate(db, hid, request)


# ── Expenses ──────────────────────────────────────────────────────────────

@router.post(
    "/expense-add",
    response_model=ExpenseCreatedResponse,
    responses=_BAD_REQUEST,
    summary="Record an expense",
)
async def expense_add(
    hid: str = Depends(household_id),
    body: Dict[str, Any] = Depends(json_body),
    db: AsyncSession = Depends(get_db_session),
) -> ExpenseCreatedResponse:
    request = ExpenseAddRequest.model_validate(body)
    return await household_service.add_expense(db, hid, request)


@router.post(
    "/expense-delete",
    response_model=OkResponse,
    responses=_BAD_REQUEST,
    summary="Delete an expense by id",
)
async def expense_delete(
    hid: str = Depends(household_id),
    body: Dict[str, Any] = Depends(json_body),
    db: AsyncSession = Depends(get_db_session),
) -> OkResponse:
    request = ExpenseDeleteRequest.model_validate(body)
    return await household_service.delete_expense(db, hid, request)
