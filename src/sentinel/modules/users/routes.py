"""User administration routes.

Self-service registration, verification and sign-in live in the
accounts module.
"""

from uuid import UUID

from fastapi import Query, status

from sentinel.core.auth.dependencies import AdminPrincipal
from sentinel.core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from sentinel.modules.users import router
from sentinel.modules.users.schemas import UserCreate, UserListResponse, UserResponse
from sentinel.modules.users.services import UserSvc


@router.get(
    "",
    response_model=UserListResponse,
    summary="List users",
    description="List users, optionally for a single tenant.",
)
async def list_users(
    service: UserSvc,
    _admin: AdminPrincipal,
    tenant_id: UUID | None = Query(None, description="Only users of this tenant"),
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="Items per page"),
) -> UserListResponse:
    users, total = await service.list_users(tenant_id, page, page_size)
    return UserListResponse(
        items=[UserResponse.model_validate(u) for u in users],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get(
    "/{user_id}",
    response_model=UserResponse,
    summary="Get user by ID",
)
async def get_user(
    user_id: UUID,
    service: UserSvc,
    _admin: AdminPrincipal,
) -> UserResponse:
    user = await service.get_user(user_id)
    return UserResponse.model_validate(user)


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create user",
)
async def create_user(
    data: UserCreate,
    service: UserSvc,
    _admin: AdminPrincipal,
) -> UserResponse:
    user = await service.create_user(data)
    return UserResponse.model_validate(user)


@router.post(
    "/{user_id}/activate",
    response_model=UserResponse,
    summary="Activate user",
)
async def activate_user(
    user_id: UUID,
    service: UserSvc,
    _admin: AdminPrincipal,
) -> UserResponse:
    user = await service.activate_user(user_id)
    return UserResponse.model_validate(user)


@router.post(
    "/{user_id}/deactivate",
    response_model=UserResponse,
    summary="Deactivate user",
)
async def deactivate_user(
    user_id: UUID,
    service: UserSvc,
    _admin: AdminPrincipal,
) -> UserResponse:
    user = await service.deactivate_user(user_id)
    return UserResponse.model_validate(user)
