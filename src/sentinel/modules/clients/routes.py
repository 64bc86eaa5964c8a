"""Client administration routes."""

from uuid import UUID

from fastapi import Query, status

from sentinel.core.auth.dependencies import AdminPrincipal
from sentinel.modules.clients import router
from sentinel.modules.clients.schemas import ClientCreate, ClientResponse, ClientUpdate
from sentinel.modules.clients.services import ClientSvc


@router.get(
    "",
    response_model=list[ClientResponse],
    summary="List clients",
)
async def list_clients(
    service: ClientSvc,
    _admin: AdminPrincipal,
    tenant_id: UUID | None = Query(None, description="Only clients of this tenant"),
) -> list[ClientResponse]:
    clients = await service.list_clients(tenant_id)
    return [ClientResponse.model_validate(c) for c in clients]


@router.get(
    "/{id}",
    response_model=ClientResponse,
    summary="Get client by ID",
)
async def get_client(
    id: UUID,
    service: ClientSvc,
    _admin: AdminPrincipal,
) -> ClientResponse:
    client = await service.get_client(id)
    return ClientResponse.model_validate(client)


@router.post(
    "",
    response_model=ClientResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register client",
    description="Registers a client and publishes it to the OAuth engine.",
)
async def create_client(
    data: ClientCreate,
    service: ClientSvc,
    _admin: AdminPrincipal,
) -> ClientResponse:
    client = await service.create_client(data)
    return ClientResponse.model_validate(client)


@router.put(
    "/{id}",
    response_model=ClientResponse,
    summary="Update client",
)
async def update_client(
    id: UUID,
    data: ClientUpdate,
    service: ClientSvc,
    _admin: AdminPrincipal,
) -> ClientResponse:
    client = await service.update_client(id, data)
    return ClientResponse.model_validate(client)


@router.delete(
    "/{id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete client",
)
async def delete_client(
    id: UUID,
    service: ClientSvc,
    _admin: AdminPrincipal,
) -> None:
    await service.delete_client(id)
