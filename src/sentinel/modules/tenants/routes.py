"""Tenant administration routes."""

from uuid import UUID

from fastapi import status

from sentinel.core.auth.dependencies import AdminPrincipal
from sentinel.modules.tenants import router
from sentinel.modules.tenants.schemas import TenantCreate, TenantResponse, TenantUpdate
from sentinel.modules.tenants.services import TenantSvc


@router.get(
    "",
    response_model=list[TenantResponse],
    summary="List tenants",
)
async def list_tenants(
    service: TenantSvc,
    _admin: AdminPrincipal,
) -> list[TenantResponse]:
    """List all tenants ordered by name."""
    tenants = await service.list_tenants()
    return [TenantResponse.model_validate(t) for t in tenants]


@router.get(
    "/{tenant_id}",
    response_model=TenantResponse,
    summary="Get tenant by ID",
)
async def get_tenant(
    tenant_id: UUID,
    service: TenantSvc,
    _admin: AdminPrincipal,
) -> TenantResponse:
    tenant = await service.get_tenant(tenant_id)
    return TenantResponse.model_validate(tenant)


@router.post(
    "",
    response_model=TenantResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create tenant",
    description="Creates a tenant. The slug is trimmed, lowercased and hyphenated before storage.",
)
async def create_tenant(
    data: TenantCreate,
    service: TenantSvc,
    _admin: AdminPrincipal,
) -> TenantResponse:
    tenant = await service.create_tenant(data)
    return TenantResponse.model_validate(tenant)


@router.put(
    "/{tenant_id}",
    response_model=TenantResponse,
    summary="Update tenant",
)
async def update_tenant(
    tenant_id: UUID,
    data: TenantUpdate,
    service: TenantSvc,
    _admin: AdminPrincipal,
) -> TenantResponse:
    tenant = await service.update_tenant(tenant_id, data)
    return TenantResponse.model_validate(tenant)


@router.delete(
    "/{tenant_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete tenant",
    description="Deletes a tenant with no clients or users. Its own scopes go with it.",
)
async def delete_tenant(
    tenant_id: UUID,
    service: TenantSvc,
    _admin: AdminPrincipal,
) -> None:
    await service.delete_tenant(tenant_id)
