"""
Eats Server: Place Store Tests
=================================

What:  PlaceStore queries against a real (temporary SQLite) database, plus
       driver-failure handling against a mocked session.

What we test:
    ✅ create assigns ids and forces approved=false
    ✅ get / update / delete, including missing ids
    ✅ update leaves approved untouched
    ✅ listings are id-ordered, filtered, and paginated by offset/limit
    ✅ approve / disapprove re-read the row; a missing id is a DatabaseError
    ✅ writes are committed before the store call returns
    ✅ driver and commit errors surface as DatabaseError with the raw message
"""

import pytest
from sqlalchemy.exc import OperationalError

from eats.exceptions import DatabaseError, NotFoundError
from eats.schemas.place import PlaceIn
from eats.services.place_store import PlaceStore


def make_place(**overrides) -> PlaceIn:
    data = {
        "name": "testname",
        "budget": 12,
        "location": "testlocation",
        "mood": "testmood",
        "cuisine": "testcuisine",
        "mealtime": "testmealtime",
        "rating": 1,
    }
    data.update(overrides)
    return PlaceIn.model_validate(data)


class TestCreateAndGet:

    def setup_method(self):
        self.store = PlaceStore()

    @pytest.mark.asyncio
    async def test_create_then_get_round_trip(self, db_session):
        created = await self.store.create_place(db_session, make_place())

        assert isinstance(created.id, int)
        fetched = await self.store.get_place(db_session, created.id)
        assert fetched.id == created.id
        assert fetched.name == "testname"
        assert fetched.budget == 12
        assert fetched.mealtime == "testmealtime"
        assert fetched.approved is False

    @pytest.mark.asyncio
    async def test_create_ignores_client_id_and_approved(self, db_session):
        payload = PlaceIn.model_validate(
            {**make_place().model_dump(), "id": 99, "approved": True}
        )

        created = await self.store.create_place(db_session, payload)

        assert created.id == 1
        assert created.approved is False

    @pytest.mark.asyncio
    async def test_ids_are_assigned_in_order(self, db_session):
        first = await self.store.create_place(db_session, make_place(name="a"))
        second = await self.store.create_place(db_session, make_place(name="b"))

        assert second.id > first.id

    @pytest.mark.asyncio
    async def test_get_missing_raises_not_found(self, db_session):
        with pytest.raises(NotFoundError) as exc_info:
            await self.store.get_place(db_session, 42)
        assert exc_info.value.message == "Place not found"


class TestUpdateAndDelete:

    def setup_method(self):
        self.store = PlaceStore()

    @pytest.mark.asyncio
    async def test_update_overwrites_content_fields(self, db_session):
        created = await self.store.create_place(db_session, make_place())

        updated = await self.store.update_place(
            db_session, created.id, make_place(name="renamed", rating=5, budget=30)
        )

        assert updated.id == created.id
        assert updated.name == "renamed"
        assert updated.rating == 5
        assert updated.budget == 30

    @pytest.mark.asyncio
    async def test_update_keeps_approved(self, db_session):
        created = await self.store.create_place(db_session, make_place())
        await self.store.approve_place(db_session, created.id)

        updated = await self.store.update_place(db_session, created.id, make_place(name="x"))

        assert updated.approved is True

    @pytest.mark.asyncio
    async def test_update_missing_raises_not_found(self, db_session):
        with pytest.raises(NotFoundError):
            await self.store.update_place(db_session, 7, make_place())

    @pytest.mark.asyncio
    async def test_delete_then_get_raises_not_found(self, db_session):
        created = await self.store.create_place(db_session, make_place())

        await self.store.delete_place(db_session, created.id)

        with pytest.raises(NotFoundError):
            await self.store.get_place(db_session, created.id)

    @pytest.mark.asyncio
    async def test_delete_missing_raises_not_found(self, db_session):
        with pytest.raises(NotFoundError):
            await self.store.delete_place(db_session, 3)


class TestModeration:

    def setup_method(self):
        self.store = PlaceStore()

    @pytest.mark.asyncio
    async def test_approve_then_disapprove(self, db_session):
        created = await self.store.create_place(db_session, make_place())

        approved = await self.store.approve_place(db_session, created.id)
        assert approved.approved is True
        assert approved.name == "testname"

        disapproved = await self.store.disapprove_place(db_session, created.id)
        assert disapproved.approved is False

    @pytest.mark.asyncio
    async def test_approve_is_idempotent(self, db_session):
        created = await self.store.create_place(db_session, make_place())

        await self.store.approve_place(db_session, created.id)
        again = await self.store.approve_place(db_session, created.id)

        assert again.approved is True

    @pytest.mark.asyncio
    async def test_approve_missing_raises_database_error(self, db_session):
        with pytest.raises(DatabaseError, match="No row was found"):
            await self.store.approve_place(db_session, 11)

    @pytest.mark.asyncio
    async def test_disapprove_missing_raises_database_error(self, db_session):
        with pytest.raises(DatabaseError, match="No row was found"):
            await self.store.disapprove_place(db_session, 11)


class TestListings:

    def setup_method(self):
        self.store = PlaceStore()

    async def _seed(self, db_session, count):
        return [
            await self.store.create_place(db_session, make_place(name=f"Place {i}"))
            for i in range(count)
        ]

    @pytest.mark.asyncio
    async def test_empty_store_returns_empty_list(self, db_session):
        assert await self.store.list_places(db_session, 0, 10) == []
        assert await self.store.list_approved(db_session, 0, 10) == []
        assert await self.store.list_requested(db_session, 0, 10) == []

    @pytest.mark.asyncio
    async def test_list_is_ordered_and_paginated(self, db_session):
        await self._seed(db_session, 5)

        page = await self.store.list_places(db_session, 2, 2)

        assert [p.id for p in page] == [3, 4]

    @pytest.mark.asyncio
    async def test_list_past_the_end_is_empty(self, db_session):
        await self._seed(db_session, 3)

        assert await self.store.list_places(db_session, 3, 10) == []

    @pytest.mark.asyncio
    async def test_approved_and_requested_are_disjoint(self, db_session):
        places = await self._seed(db_session, 4)
        await self.store.approve_place(db_session, places[1].id)
        await self.store.approve_place(db_session, places[3].id)

        approved = await self.store.list_approved(db_session, 0, 10)
        requested = await self.store.list_requested(db_session, 0, 10)

        assert [p.id for p in approved] == [2, 4]
        assert [p.id for p in requested] == [1, 3]
        assert all(p.approved for p in approved)
        assert not any(p.approved for p in requested)

    @pytest.mark.asyncio
    async def test_filtered_listing_respects_window(self, db_session):
        places = await self._seed(db_session, 6)
        for place in places:
            await self.store.approve_place(db_session, place.id)

        page = await self.store.list_approved(db_session, 1, 3)

        assert [p.id for p in page] == [2, 3, 4]


class TestDriverFailures:

    def setup_method(self):
        self.store = PlaceStore()

    @pytest.mark.asyncio
    async def test_query_failure_becomes_database_error(self, mock_db_session):
        mock_db_session.execute.side_effect = OperationalError(
            "SELECT", {}, Exception("connection refused")
        )

        with pytest.raises(DatabaseError) as exc_info:
            await self.store.get_place(mock_db_session, 1)

        assert exc_info.value.message == "connection refused"

    @pytest.mark.asyncio
    async def test_insert_failure_becomes_database_error(self, mock_db_session):
        mock_db_session.flush.side_effect = OperationalError(
            "INSERT", {}, Exception("null value in column \"name\"")
        )

        with pytest.raises(DatabaseError, match="null value"):
            await self.store.create_place(mock_db_session, make_place())

    @pytest.mark.asyncio
    async def test_listing_failure_becomes_database_error(self, mock_db_session):
        mock_db_session.execute.side_effect = OperationalError(
            "SELECT", {}, Exception("server closed the connection")
        )

        with pytest.raises(DatabaseError):
            await self.store.list_requested(mock_db_session, 0, 10)

    @pytest.mark.asyncio
    async def test_commit_failure_becomes_database_error(self, mock_db_session):
        mock_db_session.commit.side_effect = OperationalError(
            "COMMIT", {}, Exception("could not serialize access")
        )

        with pytest.raises(DatabaseError, match="could not serialize access"):
            await self.store.create_place(mock_db_session, make_place())


class TestCommits:

    def setup_method(self):
        self.store = PlaceStore()

    @pytest.mark.asyncio
    async def test_writes_are_visible_to_other_sessions(self, app, db_session):
        created = await self.store.create_place(db_session, make_place())
        await self.store.approve_place(db_session, created.id)

        async with app.state.session_factory() as other:
            fetched = await self.store.get_place(other, created.id)

        assert fetched.approved is True

    @pytest.mark.asyncio
    async def test_delete_is_visible_to_other_sessions(self, app, db_session):
        created = await self.store.create_place(db_session, make_place())
        await self.store.delete_place(db_session, created.id)

        async with app.state.session_factory() as other:
            with pytest.raises(NotFoundError):
                await self.store.get_place(other, created.id)
