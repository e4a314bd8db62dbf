from typing import Optional

from aha_api.core.exceptions import QuotaExceededError
from aha_api.core.security import Caller, Identity
from aha_api.services.user_store import UserStore

import logging

logger = logging.getLogger(__name__)


class QuotaGate:
    """Free-tier request cap around the generation endpoint."""

    def __init__(self, store: UserStore, free_request_limit: int = 3):
        self.store = store
        self.free_request_limit = free_request_limit

    async def check(self, caller: Caller) -> Optional[dict]:
        """
        Let a generation request through or raise QuotaExceededError.

        Anonymous callers and callers whose user no longer exists pass
        without touching any counter. The plan is read from the stored
        user, not from the token. Free-tier users consume one request;
        returns the user record as it stands after the gate.
        """
        if not isinstance(caller, Identity):
            return None

        user = await self.store.find_by_id(caller.user_id)
        if user is None:
            return None

        if user.get("plan", "free") != "free":
            return user

        updated = await self.store.increment_usage(caller.user_id, self.free_request_limit)
        if updated is None:
            # The plan may have changed since it was read
            current = await self.store.find_by_id(caller.user_id)
            if current is None or current.get("plan", "free") != "free":
                return current
            logger.info(f"Free request limit reached for user {caller.user_id}")
            raise QuotaExceededError()

        logger.info(
            f"User {caller.user_id} used free request "
            f"{updated['freeRequestsUsed']}/{self.free_request_limit}"
        )
        return updated
