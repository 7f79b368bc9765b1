"""Auth API: admin self-registration."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from sopdesk.api.v1.dependencies import IdentityDep, get_caller_resolver
from sopdesk.application.services.caller_service import CallerResolver
from sopdesk.core.limiter import limit_register_admin
from sopdesk.schemas.user import RegisterAdminResponse, UserResponse

router = APIRouter()


@router.post("/register-admin", response_model=RegisterAdminResponse)
@limit_register_admin
async def register_admin(
    request: Request,
    identity: IdentityDep,
    resolver: Annotated[CallerResolver, Depends(get_caller_resolver)],
):
    """Promote the authenticated user to admin of their own tenant."""
    user = await resolver.register_admin(identity)
    return RegisterAdminResponse(user=UserResponse.model_validate(user))
