from fastapi import APIRouter, Depends, Query, status

from intake.api.deps import get_orchestrator
from intake.api.schemas import (
    DocumentResponse,
    DriveImportRequest,
    DriveStatusResponse,
    RemoteFileResponse,
)
from intake.cloud_storage.models import RemoteFile
from intake.database.models import DocumentRecord
from intake.processor.orchestrator import DocumentOrchestrator

router = APIRouter(prefix="/drive", tags=["Cloud storage"])


@router.get("/status", response_model=DriveStatusResponse)
def drive_status(
    orchestrator: DocumentOrchestrator = Depends(get_orchestrator),
) -> DriveStatusResponse:
    storage_status = orchestrator.cloud_storage.status()
    return DriveStatusResponse(
        is_connected=storage_status.connected,
        configured=storage_status.configured,
        provider=storage_status.provider,
        location=storage_status.location,
        error=storage_status.error,
    )


@router.get("/files", response_model=list[RemoteFileResponse])
def list_drive_files(
    limit: int = Query(100, ge=1, le=1000),
    orchestrator: DocumentOrchestrator = Depends(get_orchestrator),
) -> list[RemoteFile]:
    return orchestrator.list_external_files(limit)


@router.post("/import", response_model=DocumentResponse, status_code=status.HTTP_201_CREATED)
def import_drive_file(
    body: DriveImportRequest,
    orchestrator: DocumentOrchestrator = Depends(get_orchestrator),
) -> DocumentRecord:
    return orchestrator.import_from_external_storage(body.file_id or "")
