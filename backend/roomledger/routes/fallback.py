"""
RoomLedger Backend — Fallback Routes
======================================

What:  Catch-all handlers for requests no other route serves.
    - OPTIONS on any path → 204 with an empty body (browser preflight)
    - any other method/path → 404 plain-text "Not Found"

Starlette keeps scanning after a path-only match, so an existing path with
the wrong method (GET /api/expense-add) lands here as a 404 instead of a 405.
This router has to be included after every other router.
"""

from fastapi import APIRouter, Request, Response

from roomledger.exceptions import NotFoundError

router = APIRouter(include_in_schema=False)

_OTHER_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD"]


@router.options("/{path:path}", status_code=204)
async def preflight(path: str) -> Response:
    return Response(status_code=204)


@router.api_route("/{path:path}", methods=_OTHER_METHODS)
async def not_found(request: Request, path: str) -> Response:
    raise NotFoundError(method=request.method, path=request.url.path)
