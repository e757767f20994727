"""
RoomLedger Backend — CORS Middleware
======================================

What:  Starlette's CORSMiddleware with preflight answers reshaped to the
       API's OPTIONS contract: always 204 with an empty body.
How:   Allowed origins keep the Access-Control-Allow-* headers the stock
       middleware computes. A disallowed origin or method still gets the
       204, only without any Access-Control-Allow-* headers, so the browser
       blocks the follow-up request itself. Simple (non-preflight) requests
       are handled by the stock middleware unchanged.
"""

from starlette.datastructures import Headers
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import Response

# Body-describing headers of the stock "OK" / "Disallowed CORS ..." reply
_BODY_HEADERS = {"content-length", "content-type"}


class PreflightCORSMiddleware(CORSMiddleware):

    def preflight_response(self, request_headers: Headers) -> Response:
        stock = super().preflight_response(request_headers)
        allowed = stock.status_code == 200

        headers = {}
        for key, value in stock.headers.items():
            if key in _BODY_HEADERS:
                continue
            if not allowed and key.startswith("access-control-"):
                continue
            headers[key] = value
        return Response(status_code=204, headers=headers)
