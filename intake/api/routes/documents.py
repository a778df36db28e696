from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status

from intake.api.deps import get_orchestrator, get_settings
from intake.api.routes.uploads import read_upload
from intake.api.schemas import (
    AnalysisResponse,
    AnalyzeRequest,
    DocumentResponse,
    OcrScheduledResponse,
)
from intake.config.settings import Settings
from intake.database.models import AnalysisRecord, DocumentRecord
from intake.processor.models import UploadOptions
from intake.processor.orchestrator import DocumentOrchestrator

router = APIRouter(prefix="/documents", tags=["Documents"])


@router.get("", response_model=list[DocumentResponse])
def list_documents(
    orchestrator: DocumentOrchestrator = Depends(get_orchestrator),
) -> list[DocumentRecord]:
    return orchestrator.list_documents()


@router.get("/recent", response_model=list[DocumentResponse])
def list_recent_documents(
    limit: int = Query(5, ge=1, le=100),
    orchestrator: DocumentOrchestrator = Depends(get_orchestrator),
) -> list[DocumentRecord]:
    return orchestrator.list_recent_documents(limit)


@router.get("/search", response_model=list[DocumentResponse])
def search_documents(
    q: str = Query(""),
    orchestrator: DocumentOrchestrator = Depends(get_orchestrator),
) -> list[DocumentRecord]:
    return orchestrator.search_documents(q)


@router.post("/upload", response_model=DocumentResponse, status_code=status.HTTP_201_CREATED)
def upload_document(
    file: UploadFile | None = File(None),
    store_in_drive: bool = Form(False, alias="storeInDrive"),
    run_ocr: bool = Form(False, alias="runOcr"),
    run_analysis: bool = Form(False, alias="runAnalysis"),
    orchestrator: DocumentOrchestrator = Depends(get_orchestrator),
    settings: Settings = Depends(get_settings),
) -> DocumentRecord:
    """Store the file and, when asked, queue OCR (and analysis after it).

    The response reflects the document at the moment it was stored; background
    progress shows up on later reads.
    """
    return orchestrator.create_from_upload(
        read_upload(file, settings.max_upload_bytes),
        UploadOptions(
            store_in_drive=store_in_drive,
            run_ocr=run_ocr,
            run_analysis=run_analysis,
        ),
    )


@router.get("/{document_id}", response_model=DocumentResponse)
def get_document(
    document_id: int,
    orchestrator: DocumentOrchestrator = Depends(get_orchestrator),
) -> DocumentRecord:
    return orchestrator.get_document(document_id)


@router.get("/{document_id}/analyses", response_model=list[AnalysisResponse])
def list_document_analyses(
    document_id: int,
    orchestrator: DocumentOrchestrator = Depends(get_orchestrator),
) -> list[AnalysisRecord]:
    return orchestrator.list_document_analyses(document_id)


@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_document(
    document_id: int,
    orchestrator: DocumentOrchestrator = Depends(get_orchestrator),
) -> None:
    orchestrator.delete_document(document_id)


@router.post(
    "/{document_id}/ocr",
    response_model=OcrScheduledResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
def schedule_ocr(
    document_id: int,
    language: str | None = Query(None),
    orchestrator: DocumentOrchestrator = Depends(get_orchestrator),
) -> OcrScheduledResponse:
    orchestrator.schedule_ocr(document_id, language)
    return OcrScheduledResponse(message="OCR processing started", document_id=document_id)


@router.post("/{document_id}/analyze", response_model=AnalysisResponse)
def analyze_document(
    document_id: int,
    body: AnalyzeRequest | None = None,
    orchestrator: DocumentOrchestrator = Depends(get_orchestrator),
) -> AnalysisRecord:
    return orchestrator.run_analysis(document_id, body.prompt if body else None)
