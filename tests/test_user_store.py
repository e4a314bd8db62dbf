"""
Tests for the MongoDB credential store.
"""

import pytest
from bson import ObjectId

from aha_api.core.exceptions import DuplicateEmailError
from aha_api.services.user_store import UserStore


@pytest.fixture
async def store(db):
    store = UserStore(db)
    await store.ensure_indexes()
    return store


async def test_create_and_find(store):
    user_id = await store.create("  Ivan ", " Ivan@Example.com ", "digest", "free")

    user = await store.find_by_id(user_id)
    assert user["name"] == "Ivan"
    assert user["email"] == "ivan@example.com"
    assert user["plan"] == "free"
    assert user["freeRequestsUsed"] == 0
    assert user["createdAt"] is not None

    by_email = await store.find_by_email("IVAN@example.COM")
    assert str(by_email["_id"]) == user_id


async def test_duplicate_email_case_insensitive(store):
    await store.create("Ivan", "ivan@example.com", "digest", "free")
    with pytest.raises(DuplicateEmailError):
        await store.create("Someone Else", "IVAN@EXAMPLE.COM", "other", "pro")


class _NoPrecheck:
    """Collection whose find_one never matches, as if a concurrent insert won."""

    def __init__(self, collection):
        self._collection = collection

    async def find_one(self, *args, **kwargs):
        return None

    def __getattr__(self, name):
        return getattr(self._collection, name)


async def test_duplicate_email_rejected_by_unique_index(store, monkeypatch):
    await store.create("Ivan", "ivan@example.com", "digest", "free")
    collection = store.get_collection()
    monkeypatch.setattr(store, "get_collection", lambda: _NoPrecheck(collection))

    with pytest.raises(DuplicateEmailError):
        await store.create("Ivan", "Ivan@example.com", "digest", "free")


async def test_find_by_unknown_or_invalid_id(store):
    assert await store.find_by_id(str(ObjectId())) is None
    assert await store.find_by_id("not-an-object-id") is None


async def test_increment_usage_stops_at_limit(store):
    user_id = await store.create("Ivan", "ivan@example.com", "digest", "free")

    for expected in (1, 2, 3):
        updated = await store.increment_usage(user_id, 3)
        assert updated["freeRequestsUsed"] == expected

    assert await store.increment_usage(user_id, 3) is None
    user = await store.find_by_id(user_id)
    assert user["freeRequestsUsed"] == 3


async def test_increment_usage_without_counter_field(store, db):
    result = await db.users.insert_one({"name": "Old", "email": "old@example.com", "password": "x", "plan": "free"})
    updated = await store.increment_usage(str(result.inserted_id), 3)
    assert updated["freeRequestsUsed"] == 1


async def test_increment_usage_invalid_id(store):
    assert await store.increment_usage("bogus", 3) is None


async def test_list_all_excludes_password(store):
    await store.create("Ivan", "ivan@example.com", "digest", "free")
    await store.create("Anna", "anna@example.com", "digest", "pro")

    users = await store.list_all()
    assert len(users) == 2
    for user in users:
        assert "password" not in user
        assert isinstance(user["_id"], str)


@pytest.mark.parametrize("plan", ["pro", "ultimate"])
async def test_increment_usage_skips_paid_plans(store, plan):
    user_id = await store.create("Anna", "anna@example.com", "digest", plan)
    assert await store.increment_usage(user_id, 3) is None
    user = await store.find_by_id(user_id)
    assert user["freeRequestsUsed"] == 0
