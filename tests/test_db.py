"""Peewee user store."""

import pytest

from vod.server.db import UserTable
from vod.server.errors import ConstraintViolation, PersistenceError
from vod.server.models import User


class TestPeeweeUserStore:

    @pytest.mark.asyncio
    async def test_create_returns_persisted_user(self, store):
        saved = await store.create_or_save(
            User(id="u1", nick_name="alice", password="p1", avatar="a.png")
        )

        assert saved.id == "u1"
        assert saved.nick_name == "alice"
        assert saved.avatar == "a.png"
        assert saved.description is None
        assert UserTable.select().count() == 1

    @pytest.mark.asyncio
    async def test_duplicate_nick_name_is_constraint_violation(self, store):
        await store.create_or_save(User(id="u1", nick_name="alice", password="p1"))

        with pytest.raises(ConstraintViolation) as exc_info:
            await store.create_or_save(User(id="u2", nick_name="alice", password="p2"))

        assert exc_info.value.column == "nick_name"
        assert UserTable.select().count() == 1

    @pytest.mark.asyncio
    async def test_save_existing_id_overwrites_row(self, store):
        first = await store.create_or_save(User(id="u1", nick_name="alice", password="p1"))
        second = await store.create_or_save(
            User(id="u1", nick_name="alice2", password="p2", description="hi")
        )

        assert second.nick_name == "alice2"
        assert second.password == "p2"
        assert second.description == "hi"
        assert second.created_at == first.created_at
        assert UserTable.select().count() == 1

    @pytest.mark.asyncio
    async def test_find_one(self, store):
        await store.create_or_save(User(id="u1", nick_name="alice", password="p1"))

        assert (await store.find_one(id="u1")).nick_name == "alice"
        assert (await store.find_one(nick_name="alice")).id == "u1"
        assert await store.find_one(id="missing") is None
        assert await store.find_one(nick_name="nobody") is None

    @pytest.mark.asyncio
    async def test_find_one_rejects_unknown_predicate(self, store):
        with pytest.raises(PersistenceError):
            await store.find_one(password="p1")
        with pytest.raises(PersistenceError):
            await store.find_one(id="u1", nick_name="alice")

    @pytest.mark.asyncio
    async def test_update_fields(self, store):
        await store.create_or_save(User(id="u1", nick_name="alice", password="p1", description="d"))

        await store.update_fields("u1", {"avatar": "x"})

        user = await store.find_one(id="u1")
        assert user.avatar == "x"
        assert user.nick_name == "alice"
        assert user.description == "d"

    @pytest.mark.asyncio
    async def test_update_missing_id_is_noop(self, store):
        await store.update_fields("missing", {"password": "p"})
        assert UserTable.select().count() == 0

    @pytest.mark.asyncio
    async def test_update_rejects_unknown_column(self, store):
        with pytest.raises(PersistenceError):
            await store.update_fields("u1", {"id": "u2"})

    @pytest.mark.asyncio
    async def test_update_to_taken_nick_name_is_constraint_violation(self, store):
        await store.create_or_save(User(id="u1", nick_name="alice", password="p1"))
        await store.create_or_save(User(id="u2", nick_name="bob", password="p2"))

        with pytest.raises(ConstraintViolation):
            await store.update_fields("u2", {"nick_name": "alice"})

    @pytest.mark.asyncio
    async def test_missing_table_is_persistence_error(self, store):
        UserTable.drop_table()

        with pytest.raises(PersistenceError) as exc_info:
            await store.find_one(id="u1")

        assert not isinstance(exc_info.value, ConstraintViolation)
