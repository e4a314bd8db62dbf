from bson import ObjectId
from bson.errors import InvalidId
from datetime import datetime, timezone
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError
from typing import List, Optional

from aha_api.core.exceptions import DuplicateEmailError

import logging

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _object_id(user_id: str) -> Optional[ObjectId]:
    try:
        return ObjectId(user_id)
    except (InvalidId, TypeError):
        return None


class UserStore:
    """Persists user records in the `users` collection."""

    def __init__(self, db):
        self.db = db
        self.collection_name = "users"

    def get_collection(self):
        return self.db[self.collection_name]

    async def ensure_indexes(self):
        collection = self.get_collection()
        await collection.create_index("email", unique=True)
        logger.info("Ensured unique index on users.email")

    async def create(self, name: str, email: str, password_hash: str, plan: str) -> str:
        collection = self.get_collection()
        email = normalize_email(email)

        if await collection.find_one({"email": email}, {"_id": 1}):
            raise DuplicateEmailError()

        user = {
            "name": name.strip(),
            "email": email,
            "password": password_hash,
            "plan": plan,
            "freeRequestsUsed": 0,
            "createdAt": datetime.now(timezone.utc),
        }
        try:
            result = await collection.insert_one(user)
        except DuplicateKeyError:
            # Lost a race with a concurrent registration
            raise DuplicateEmailError()

        user_id = str(result.inserted_id)
        logger.info(f"Created user {user_id} on plan {plan}")
        return user_id

    async def find_by_email(self, email: str) -> Optional[dict]:
        collection = self.get_collection()
        return await collection.find_one({"email": normalize_email(email)})

    async def find_by_id(self, user_id: str) -> Optional[dict]:
        oid = _object_id(user_id)
        if oid is None:
            return None
        collection = self.get_collection()
        return await collection.find_one({"_id": oid})

    async def increment_usage(self, user_id: str, limit: int) -> Optional[dict]:
        """
        Atomically bump the free request counter of a free-plan user if it is
        below `limit`.

        Returns the updated user, or None when the counter is already at the
        limit, the user is no longer on the free plan, or does not exist. The
        check and the increment are a single conditional update, so concurrent
        callers cannot overshoot.
        """
        oid = _object_id(user_id)
        if oid is None:
            return None
        collection = self.get_collection()
        return await collection.find_one_and_update(
            {
                "_id": oid,
                # Older documents may not carry the plan or the counter yet
                "$and": [
                    {"$or": [
                        {"plan": "free"},
                        {"plan": {"$exists": False}},
                    ]},
                    {"$or": [
                        {"freeRequestsUsed": {"$lt": limit}},
                        {"freeRequestsUsed": {"$exists": False}},
                    ]},
                ],
            },
            {"$inc": {"freeRequestsUsed": 1}},
            return_document=ReturnDocument.AFTER,
        )

    async def list_all(self) -> List[dict]:
        collection = self.get_collection()
        cursor = collection.find({}, {"password": 0})
        users = []
        async for doc in cursor:
            doc["_id"] = str(doc["_id"])
            users.append(doc)
        return users
