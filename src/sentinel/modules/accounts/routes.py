"""Self-service account routes."""

from fastapi import Query, status

from sentinel.core.auth.schemas import AuthenticatedPrincipal
from sentinel.core.auth.service import UserAuth
from sentinel.core.utils.text import parse_scope_string
from sentinel.modules.accounts import router
from sentinel.modules.accounts.schemas import (
    LoginRequest,
    RegisterRequest,
    RegisterResponse,
    VerifyResponse,
)
from sentinel.modules.accounts.services import RegistrationSvc
from sentinel.modules.users.schemas import UserResponse
from sentinel.modules.verification.services import TokenManager


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register",
    description="Creates an inactive user in an existing tenant and emails a verification link.",
)
async def register(
    data: RegisterRequest,
    service: RegistrationSvc,
) -> RegisterResponse:
    user = await service.register(data)
    return RegisterResponse(user=UserResponse.model_validate(user))


@router.get(
    "/verify",
    response_model=VerifyResponse,
    summary="Verify email",
    description="Consumes a verification token and activates its user. Tokens work once.",
)
async def verify(
    tokens: TokenManager,
    token: str = Query("", description="Token from the verification email"),
) -> VerifyResponse:
    user = await tokens.consume(token)
    return VerifyResponse(user=UserResponse.model_validate(user))


@router.post(
    "/login",
    response_model=AuthenticatedPrincipal,
    summary="Sign in",
    description=(
        "Checks tenant, email and password and returns the verified principal "
        "with its granted scopes. Any failure gives the same 401."
    ),
)
async def login(
    data: LoginRequest,
    authenticator: UserAuth,
) -> AuthenticatedPrincipal:
    return await authenticator.authenticate(
        data.tenant_slug,
        data.email,
        data.password,
        parse_scope_string(data.scope),
    )
