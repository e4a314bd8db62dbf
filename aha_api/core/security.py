"""Password hashing and bearer token handling."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Union
import logging

import bcrypt
import jwt

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"


@dataclass(frozen=True)
class Identity:
    """Caller resolved from a valid bearer token."""
    user_id: str
    plan: str


class Anonymous:
    """Caller without a usable bearer token."""

    def __repr__(self):
        return "ANONYMOUS"


ANONYMOUS = Anonymous()

Caller = Union[Identity, Anonymous]

# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72


def _secret_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


class PasswordHasher:
    """bcrypt hashing with a cost factor fixed when the hasher is built."""

    def __init__(self, rounds: int = 10):
        self.rounds = rounds

    def hash(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(_secret_bytes(password), salt).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(_secret_bytes(password), password_hash.encode("utf-8"))
        except ValueError:
            # Stored value is not a bcrypt digest
            return False


class TokenService:
    """Issues and verifies signed, time-limited identity tokens."""

    def __init__(self, secret: str, expire_days: int = 7):
        self.secret = secret
        self.expire_days = expire_days

    def issue(self, user_id: str, plan: str) -> str:
        """
        Create a token for a user.

        The plan is a snapshot taken now; it is not refreshed if the
        stored user record changes before the token expires.
        """
        now = datetime.now(timezone.utc)
        payload = {
            "id": str(user_id),
            "plan": plan,
            "iat": int(now.timestamp()),
            "exp": int((now + timedelta(days=self.expire_days)).timestamp()),
        }
        return jwt.encode(payload, self.secret, algorithm=JWT_ALGORITHM)

    def verify(self, token: str) -> Optional[Identity]:
        """Return the identity inside a token, or None if it is not valid."""
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[JWT_ALGORITHM],
                options={"require": ["exp"]},
            )
        except jwt.ExpiredSignatureError:
            logger.info("Rejected expired token")
            return None
        except jwt.InvalidTokenError as e:
            logger.info(f"Rejected invalid token: {e}")
            return None

        user_id = payload.get("id")
        plan = payload.get("plan")
        if not isinstance(user_id, str) or not isinstance(plan, str):
            return None
        return Identity(user_id=user_id, plan=plan)

    def resolve_identity(self, authorization: Optional[str]) -> Caller:
        """
        Resolve an Authorization header value to a caller.

        Anything other than a valid "Bearer <token>" is anonymous.
        """
        if not authorization:
            return ANONYMOUS

        parts = authorization.split(" ")
        if len(parts) != 2 or parts[0] != "Bearer":
            return ANONYMOUS

        identity = self.verify(parts[1])
        if identity is None:
            return ANONYMOUS
        return identity
