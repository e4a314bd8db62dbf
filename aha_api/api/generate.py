from fastapi import APIRouter, Depends, HTTPException

from aha_api.api.deps import get_caller, get_context
from aha_api.core.context import AppContext
from aha_api.core.exceptions import InternalError, ValidationError
from aha_api.core.security import Caller
from aha_api.schemas.generate import GenerateRequest, GenerateResponse
import logging

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Generation"])


@router.post("/generate", response_model=GenerateResponse)
@router.post("/generate/", response_model=GenerateResponse, include_in_schema=False)
async def generate(
    request: GenerateRequest,
    caller: Caller = Depends(get_caller),
    context: AppContext = Depends(get_context)
):
    """
    Proxy a prompt to the completion API.

    A bearer token is optional. Free-tier users get 3 requests in total;
    pro, ultimate and anonymous callers are not limited.
    """
    if not request.userPrompt:
        raise ValidationError("userPrompt required")

    try:
        await context.quota.check(caller)
        result = await context.llm.generate(
            user_prompt=request.userPrompt,
            system_prompt=request.systemPrompt,
            model=request.model
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error generating completion: {e}")
        raise InternalError(str(e))

    return GenerateResponse(result=result)
