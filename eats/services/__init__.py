# Services package init
"""
Eats Server: Services Layer
==============================

What:  Data-access layer sitting between routes (HTTP) and the database.

Service Inventory:
    - PlaceStore: CRUD, listing and moderation queries for the `places` table

Routes handle HTTP; the store handles SQL. The store can be exercised
directly against an AsyncSession without going through the HTTP layer.
"""
