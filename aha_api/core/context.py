from dataclasses import dataclass
from typing import Optional
import logging

from aha_api.core.config import Settings
from aha_api.core.security import PasswordHasher, TokenService
from aha_api.db.mongo import MongoDB
from aha_api.services.llm_client import LLMClient
from aha_api.services.quota import QuotaGate
from aha_api.services.user_service import UserService
from aha_api.services.user_store import UserStore

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Everything a request handler needs, built once at startup."""
    settings: Settings
    users: UserStore
    user_service: UserService
    tokens: TokenService
    quota: QuotaGate
    llm: LLMClient
    mongodb: Optional[MongoDB] = None

    async def close(self):
        await self.llm.close()
        if self.mongodb:
            await self.mongodb.close_database_connection()


def build_context(settings: Settings, db, llm: Optional[LLMClient] = None, mongodb: Optional[MongoDB] = None) -> AppContext:
    """Wire the services on top of an already-connected database."""
    users = UserStore(db)
    hasher = PasswordHasher(rounds=settings.BCRYPT_ROUNDS)
    tokens = TokenService(settings.JWT_SECRET, expire_days=settings.TOKEN_EXPIRE_DAYS)
    return AppContext(
        settings=settings,
        users=users,
        user_service=UserService(users, hasher, tokens),
        tokens=tokens,
        quota=QuotaGate(users, free_request_limit=settings.FREE_REQUEST_LIMIT),
        llm=llm or LLMClient(settings),
        mongodb=mongodb,
    )


async def create_context(settings: Settings) -> AppContext:
    """Connect to MongoDB and build the application context."""
    mongodb = MongoDB(settings)
    await mongodb.connect_to_database()
    context = build_context(settings, mongodb.db, mongodb=mongodb)
    await context.users.ensure_indexes()
    logger.info("Application context ready")
    return context
