# Middleware package init
"""
RoomLedger Backend — Middleware Package
========================================

Middleware Chain:
    Request → [Request ID] → [Access Log] → [CORS, if configured] → Route Handler

    1. Request ID first, so the access log line carries the correlation id
    2. Access log measures handler duration and status
    3. CORS answers preflights with an empty 204, like the OPTIONS fallback
"""
