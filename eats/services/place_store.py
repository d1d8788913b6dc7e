"""
Eats Server: Place Store (Record Store)
==========================================

What:  The only module that builds and runs SQL against the `places` table.
How:   Each operation receives the per-request AsyncSession, executes one or
       two statements, and returns ORM `Place` rows (or nothing).
Who:   Called by the route handlers in `eats.routes.places`.

Operation summary:
    get_place        SELECT ... WHERE id = :id             → NotFoundError if none
    create_place     INSERT (approved forced false)        → row with new id
    update_place     UPDATE content columns WHERE id = :id → re-read row
    delete_place     DELETE WHERE id = :id
    list_places      SELECT ... ORDER BY id LIMIT/OFFSET
    list_approved    ... WHERE approved = true  ORDER BY id
    list_requested   ... WHERE approved = false ORDER BY id
    approve_place    UPDATE approved = true  → re-read row
    disapprove_place UPDATE approved = false → re-read row

Missing rows:
    update_place and delete_place check the affected-row count; zero rows
    raises NotFoundError. approve/disapprove re-read with scalar_one(), so a
    missing id surfaces as a DatabaseError like any other store failure.

Transactions:
    Every write commits before returning, so the route handler only builds a
    success response for data that is durably stored.

Failures:
    SQLAlchemyError from the driver (commit included) is wrapped in
    DatabaseError carrying the raw driver message. The request transaction is
    rolled back by `get_db_session`.

The store keeps no state between calls; a single module-level instance is
shared by all requests.
"""

import logging
from typing import List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from eats.exceptions import DatabaseError, NotFoundError
from eats.models.place import Place
from eats.schemas.place import PlaceIn

logger = logging.getLogger(__name__)


def _raw_error_text(exc: SQLAlchemyError) -> str:
    """The driver's own message when there is one, else SQLAlchemy's."""
    if isinstance(exc, DBAPIError) and exc.orig is not None:
        return str(exc.orig)
    return str(exc)


class PlaceStore:
    """
    CRUD and moderation queries for Place records.

    All listing queries are ordered by id ascending so that offset/limit
    pages are stable between calls.
    """

    def _database_error(self, action: str, exc: SQLAlchemyError, **context) -> DatabaseError:
        message = _raw_error_text(exc)
        logger.error("Database error %s: %s | Context: %s", action, message, context)
        return DatabaseError(message=message, context={"action": action, **context})

    # ── Single-row reads ──────────────────────────────────────────────────

    async def get_place(self, db: AsyncSession, place_id: int) -> Place:
        """
        Fetch one place by id.

        populate_existing refreshes an instance already in the session's
        identity map, so a read after a bulk UPDATE sees the new values.

        Raises:
            NotFoundError: no row has this id (→ 404)
            DatabaseError: query failed (→ 500)
        """
        try:
            result = await db.execute(
                select(Place)
                .where(Place.id == place_id)
                .execution_options(populate_existing=True)
            )
            place = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise self._database_error("fetching place", e, place_id=place_id) from e

        if place is None:
            raise NotFoundError(resource="Place", resource_id=place_id)
        return place

    # ── Writes ────────────────────────────────────────────────────────────

    async def _commit(self, db: AsyncSession, action: str, **context) -> None:
        try:
            await db.commit()
        except SQLAlchemyError as e:
            raise self._database_error(action, e, **context) from e

    async def create_place(self, db: AsyncSession, data: PlaceIn) -> Place:
        """
        Insert a new place in the "requested" state.

        The id is assigned by the database during flush; the returned
        instance has it populated.
        """
        place = Place(
            **{field: getattr(data, field) for field in Place.CONTENT_FIELDS},
            approved=False,
        )
        try:
            db.add(place)
            await db.flush()
        except SQLAlchemyError as e:
            raise self._database_error("creating place", e, name=data.name) from e

        await self._commit(db, "creating place", name=data.name)
        logger.info("Place %s created (approved=false)", place.id)
        return place

    async def update_place(self, db: AsyncSession, place_id: int, data: PlaceIn) -> Place:
        """
        Overwrite the content columns of an existing place.

        id and approved are never touched here. Returns the row as stored
        after the update.

        Raises:
            NotFoundError: no row has this id
            DatabaseError: statement or commit failed
        """
        values = {field: getattr(data, field) for field in Place.CONTENT_FIELDS}
        try:
            result = await db.execute(
                update(Place).where(Place.id == place_id).values(**values)
            )
        except SQLAlchemyError as e:
            raise self._database_error("updating place", e, place_id=place_id) from e

        if result.rowcount == 0:
            raise NotFoundError(resource="Place", resource_id=place_id)
        await self._commit(db, "updating place", place_id=place_id)
        return await self.get_place(db, place_id)

    async def delete_place(self, db: AsyncSession, place_id: int) -> None:
        """Hard-delete a place. Raises NotFoundError if nothing was deleted."""
        try:
            result = await db.execute(delete(Place).where(Place.id == place_id))
        except SQLAlchemyError as e:
            raise self._database_error("deleting place", e, place_id=place_id) from e

        if result.rowcount == 0:
            raise NotFoundError(resource="Place", resource_id=place_id)
        await self._commit(db, "deleting place", place_id=place_id)
        logger.info("Place %s deleted", place_id)

    # ── Moderation ────────────────────────────────────────────────────────

    async def approve_place(self, db: AsyncSession, place_id: int) -> Place:
        return await self._set_approved(db, place_id, True)

    async def disapprove_place(self, db: AsyncSession, place_id: int) -> Place:
        return await self._set_approved(db, place_id, False)

    async def _set_approved(self, db: AsyncSession, place_id: int, approved: bool) -> Place:
        """
        Flip the moderation flag and return the re-read row.

        The re-read uses scalar_one(): an id with no row raises NoResultFound,
        which is reported as a DatabaseError (→ 500) and rolls the request back.
        """
        try:
            await db.execute(
                update(Place).where(Place.id == place_id).values(approved=approved)
            )
            result = await db.execute(
                select(Place)
                .where(Place.id == place_id)
                .execution_options(populate_existing=True)
            )
            place = result.scalar_one()
        except SQLAlchemyError as e:
            raise self._database_error(
                "setting approved", e, place_id=place_id, approved=approved
            ) from e

        await self._commit(db, "setting approved", place_id=place_id, approved=approved)
        logger.info("Place %s approved=%s", place_id, approved)
        return place

    # ── Listings ──────────────────────────────────────────────────────────

    async def list_places(self, db: AsyncSession, start: int, count: int) -> List[Place]:
        """Every place, `count` rows after skipping `start`."""
        return await self._list(db, start, count)

    async def list_approved(self, db: AsyncSession, start: int, count: int) -> List[Place]:
        """Places visible to the public (approved = true)."""
        return await self._list(db, start, count, approved=True)

    async def list_requested(self, db: AsyncSession, start: int, count: int) -> List[Place]:
        """Places awaiting moderation (approved = false)."""
        return await self._list(db, start, count, approved=False)

    async def _list(
        self,
        db: AsyncSession,
        start: int,
        count: int,
        approved: Optional[bool] = None,
    ) -> List[Place]:
        query = select(Place)
        if approved is not None:
            query = query.where(Place.approved == approved)
        query = query.order_by(Place.id.asc()).offset(start).limit(count)

        try:
            result = await db.execute(query)
        except SQLAlchemyError as e:
            raise self._database_error(
                "listing places", e, start=start, count=count, approved=approved
            ) from e
        return list(result.scalars().all())


# ── Singleton Instance ────────────────────────────────────────────────────
place_store = PlaceStore()
