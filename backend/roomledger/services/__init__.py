# Services package init
"""
RoomLedger Backend — Services Layer
=====================================

What:  Business logic layer sitting between routes (HTTP) and database (persistence).

Service Inventory:
    - HouseholdService: roommate and expense operations, scoped to one household

Routes stay thin: they resolve the household id and body, then delegate here.
"""
