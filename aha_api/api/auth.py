from fastapi import APIRouter, Depends, HTTPException

from aha_api.api.deps import get_context
from aha_api.core.context import AppContext
from aha_api.core.exceptions import InternalError
from aha_api.schemas.user import LoginRequest, LoginResponse, UserSummary
import logging

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Authentication"])


@router.post("/login", response_model=LoginResponse)
@router.post("/login/", response_model=LoginResponse, include_in_schema=False)
async def login(
    request: LoginRequest,
    context: AppContext = Depends(get_context)
):
    """
    Exchange email and password for a bearer token valid for 7 days.

    Bad credentials answer 400, not 401, and do not say whether the
    email exists.
    """
    try:
        token, user = await context.user_service.login(request.email, request.password)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Login error: {e}")
        raise InternalError()

    return LoginResponse(
        token=token,
        user=UserSummary(
            id=str(user["_id"]),
            name=user["name"],
            email=user["email"],
            plan=user.get("plan", "free"),
            freeRequestsUsed=user.get("freeRequestsUsed", 0)
        )
    )
