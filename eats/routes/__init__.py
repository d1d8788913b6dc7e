# Routes package init
"""
Eats Server: API Routes Package
==================================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - places.py:  /places collection, single-place CRUD, approve/disapprove
    - health.py:  GET /health (static liveness check)

Routes are thin: extract data from the request, call PlaceStore, shape the
response. Error formatting lives in the global handlers in main.py.
"""
