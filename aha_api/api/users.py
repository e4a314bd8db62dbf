from fastapi import APIRouter, Depends, HTTPException
from typing import List

from aha_api.api.deps import get_context
from aha_api.core.context import AppContext
from aha_api.core.exceptions import InternalError
from aha_api.schemas.user import User, UserCreate, UserCreated
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


@router.post("", response_model=UserCreated, status_code=201)
@router.post("/", response_model=UserCreated, status_code=201, include_in_schema=False)
async def create_user(
    request: UserCreate,
    context: AppContext = Depends(get_context)
):
    """Register a new user. The plan defaults to `free`."""
    try:
        user_id = await context.user_service.register(
            name=request.name,
            email=request.email,
            password=request.password,
            plan=request.plan
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error creating user: {e}")
        raise InternalError(str(e))

    return UserCreated(id=user_id)


@router.get("", response_model=List[User], response_model_by_alias=True)
@router.get("/", response_model=List[User], response_model_by_alias=True, include_in_schema=False)
async def list_users(context: AppContext = Depends(get_context)):
    """List all users. Password hashes are never included."""
    try:
        return await context.users.list_all()
    except Exception as e:
        logger.error(f"Error listing users: {e}")
        raise InternalError(str(e))
