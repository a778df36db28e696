from fastapi import APIRouter, Depends

from intake.api.deps import get_connection_service
from intake.api.schemas import ServiceConnectionResponse
from intake.database.models import ServiceConnectionRecord
from intake.services.connection_service import ConnectionService

router = APIRouter(prefix="/connections", tags=["Connections"])


@router.get("", response_model=list[ServiceConnectionResponse])
def list_connections(
    connections: ConnectionService = Depends(get_connection_service),
) -> list[ServiceConnectionRecord]:
    return connections.list_connections()


@router.post("/{service_type}/connect", response_model=ServiceConnectionResponse)
def connect_service(
    service_type: str,
    connections: ConnectionService = Depends(get_connection_service),
) -> ServiceConnectionRecord:
    return connections.connect(service_type)


@router.post("/{service_type}/disconnect", response_model=ServiceConnectionResponse)
def disconnect_service(
    service_type: str,
    connections: ConnectionService = Depends(get_connection_service),
) -> ServiceConnectionRecord:
    return connections.disconnect(service_type)
