"""
RoomLedger Backend — Pydantic Request/Response Schemas
=======================================================

What:  Pydantic models defining the API contract between frontend and backend.
How:   Request models accept whatever JSON the client sent (fields typed `Any`)
       so that a wrong type becomes the endpoint's own 400 message instead of
       FastAPI's generic 422. The service layer does the real validation.
       Response models fix the JSON shape of every success payload.

Field names on the wire are camelCase where the frontend sends them that way
(`oldName`, `newName`); Python attributes stay snake_case.
"""

from datetime import datetime
from typing import Any, List

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Request Models — What the client sends in POST bodies
# ══════════════════════════════════════════════════════════════════════════


class _Body(BaseModel):
    """Lenient base: unknown keys ignored, aliases and field names both accepted."""

    model_config = {"extra": "ignore", "populate_by_name": True}


class RoommateNameRequest(_Body):
    """Body of roommate-add and roommate-remove."""
    name: Any = None


class RoommateRenameRequest(_Body):
    """Body of roommate-rename."""
    old_name: Any = Field(default=None, alias="oldName")
    new_name: Any = Field(default=None, alias="newName")


class ExpenseAddRequest(_Body):
    """Body of expense-add. `amount` may be a JSON number or a numeric string."""
    payer: Any = None
    name: Any = None
    amount: Any = None


class ExpenseDeleteRequest(_Body):
    """Body of expense-delete."""
    id: Any = None


# ══════════════════════════════════════════════════════════════════════════
# Response Models — What the API returns to clients
# ══════════════════════════════════════════════════════════════════════════


class ExpenseItem(BaseModel):
    """
    What:  One expense row as shown in the household list.
    Why float amount: the list is for display; exact cents live in the DB.
    """
    id: int = Field(description="Expense id (ascending = creation order)")
    payer: str = Field(description="Name of the roommate who paid")
    name: str = Field(description="What the expense was for")
    amount: float = Field(description="Amount paid, two decimal places")
    created_at: datetime = Field(description="Insertion time (ISO 8601)")

    model_config = {"from_attributes": True}


class StateResponse(BaseModel):
    """
    What:  Full household snapshot.
    Who:   Returned by GET /api/state.
    """
    roommates: List[str] = Field(description="Roommate names, sorted by name")
    expenses: List[ExpenseItem] = Field(description="All expenses, oldest first")


class OkResponse(BaseModel):
    """Acknowledgement for mutations that return no data."""
    ok: bool = True


class ExpenseCreatedResponse(BaseModel):
    """Returned by expense-add."""
    id: int = Field(description="Generated expense id")


class PingResponse(BaseModel):
    """Liveness answer for GET /api/ping and GET /api/."""
    ok: bool = True
    hid: str = Field(description="Household id the request resolved to")
    message: str


class ErrorResponse(BaseModel):
    """
    What:  Body of every 400 response.
    Example: {"error": "invalid expense"}
    """
    error: str = Field(description="Short, stable error message")


class HealthResponse(BaseModel):
    """
    What:  Health check response showing service and database status.
    Who:   Returned by GET /health for monitoring and load balancer checks.
    """
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
