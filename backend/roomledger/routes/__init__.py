# Routes package init
"""
RoomLedger Backend — API Routes Package
=========================================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - household.py: GET  /api/state               (roommates + expenses)
                    GET  /api/ping, /api, /api/    (liveness)
                    POST /api/roommate-add
                    POST /api/roommate-rename
                    POST /api/roommate-remove
                    POST /api/expense-add
                    POST /api/expense-delete
    - health.py:    GET  /health                   (service + database check)
    - fallback.py:  OPTIONS *                      (204, CORS preflight)
                    anything else                  (404 "Not Found")

fallback.router must be included LAST: its catch-all paths only win when
no other route matches both path and method.
"""
