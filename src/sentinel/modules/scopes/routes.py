"""Scope administration routes."""

from uuid import UUID

from fastapi import status

from sentinel.core.auth.dependencies import AdminPrincipal
from sentinel.modules.scopes import router
from sentinel.modules.scopes.schemas import ScopeCreate, ScopeResponse, ScopeUpdate
from sentinel.modules.scopes.services import ScopeSvc


@router.get("", response_model=list[ScopeResponse], summary="List scopes")
async def list_scopes(service: ScopeSvc, _admin: AdminPrincipal) -> list[ScopeResponse]:
    scopes = await service.list_scopes()
    return [ScopeResponse.model_validate(s) for s in scopes]


@router.get("/{scope_id}", response_model=ScopeResponse, summary="Get scope by ID")
async def get_scope(scope_id: UUID, service: ScopeSvc, _admin: AdminPrincipal) -> ScopeResponse:
    scope = await service.get_scope(scope_id)
    return ScopeResponse.model_validate(scope)


@router.post(
    "",
    response_model=ScopeResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create scope",
    description="Creates a global scope, or a tenant scope when tenant_id is given.",
)
async def create_scope(
    data: ScopeCreate,
    service: ScopeSvc,
    _admin: AdminPrincipal,
) -> ScopeResponse:
    scope = await service.create_scope(data)
    return ScopeResponse.model_validate(scope)


@router.put("/{scope_id}", response_model=ScopeResponse, summary="Update scope")
async def update_scope(
    scope_id: UUID,
    data: ScopeUpdate,
    service: ScopeSvc,
    _admin: AdminPrincipal,
) -> ScopeResponse:
    scope = await service.update_scope(scope_id, data)
    return ScopeResponse.model_validate(scope)


@router.delete(
    "/{scope_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete scope",
    description="Fails with 409 while any client lists the scope as allowed.",
)
async def delete_scope(scope_id: UUID, service: ScopeSvc, _admin: AdminPrincipal) -> None:
    await service.delete_scope(scope_id)
