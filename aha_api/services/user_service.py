from typing import Optional, Tuple

from aha_api.core.exceptions import AuthError, ValidationError
from aha_api.core.security import PasswordHasher, TokenService
from aha_api.schemas.user import PLANS
from aha_api.services.user_store import UserStore

import logging

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def _blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


class UserService:
    """Registration and login on top of the credential store."""

    def __init__(self, store: UserStore, hasher: PasswordHasher, tokens: TokenService):
        self.store = store
        self.hasher = hasher
        self.tokens = tokens

    async def register(
        self,
        name: Optional[str],
        email: Optional[str],
        password: Optional[str],
        plan: Optional[str] = None
    ) -> str:
        """Validate, hash and store a new user. Returns the new user id."""
        if _blank(name) or _blank(email) or not password:
            raise ValidationError("all fields required")

        # Length is checked on the plaintext, before hashing
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"password must be at least {MIN_PASSWORD_LENGTH} characters"
            )

        plan = plan or "free"
        if plan not in PLANS:
            raise ValidationError(f"plan must be one of: {', '.join(PLANS)}")

        password_hash = self.hasher.hash(password)
        return await self.store.create(name, email, password_hash, plan)

    async def login(self, email: Optional[str], password: Optional[str]) -> Tuple[str, dict]:
        """
        Check credentials and issue a token.

        Unknown email and wrong password raise the same AuthError.
        """
        if _blank(email) or not password:
            raise ValidationError("email and password required")

        user = await self.store.find_by_email(email)
        if not user or not self.hasher.verify(password, user.get("password", "")):
            logger.info("Failed login attempt")
            raise AuthError()

        user_id = str(user["_id"])
        token = self.tokens.issue(user_id, user.get("plan", "free"))
        logger.info(f"User {user_id} logged in")
        return token, user
