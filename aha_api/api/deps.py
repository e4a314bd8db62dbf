from fastapi import Depends, Header, Request
from typing import Optional

from aha_api.core.context import AppContext
from aha_api.core.security import Caller


def get_context(request: Request) -> AppContext:
    """Application context attached to the app at startup."""
    return request.app.state.context


async def get_caller(
    authorization: Optional[str] = Header(None),
    context: AppContext = Depends(get_context)
) -> Caller:
    """
    Resolve the optional bearer token.

    Never fails: a missing, malformed or expired token is an anonymous caller.
    """
    return context.tokens.resolve_identity(authorization)
