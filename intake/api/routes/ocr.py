from fastapi import APIRouter, Depends, File, Form, UploadFile

from intake.api.deps import get_orchestrator, get_settings
from intake.api.routes.uploads import read_upload
from intake.api.schemas import LanguageResponse, OcrResultResponse
from intake.config.settings import Settings
from intake.ocr.languages import list_languages
from intake.processor.exceptions import DocumentValidationError
from intake.processor.orchestrator import DocumentOrchestrator

router = APIRouter(prefix="/ocr", tags=["OCR"])


@router.post("/process", response_model=OcrResultResponse)
def process_ocr(
    file: UploadFile | None = File(None),
    document_id: int | None = Form(None, alias="documentId"),
    language: str | None = Form(None),
    orchestrator: DocumentOrchestrator = Depends(get_orchestrator),
    settings: Settings = Depends(get_settings),
) -> OcrResultResponse:
    """Run OCR synchronously on an ad-hoc file or a stored document.

    An uploaded file takes precedence over ``documentId``. A stored document
    gets its content and status updated; an ad-hoc file leaves no records behind. Neither path continues into analysis.
    """
    code = language or settings.ocr_default_language
    if file is not None:
        text = orchestrator.extract_text(read_upload(file, settings.max_upload_bytes), language)
        return OcrResultResponse(text=text, language=code)
    if document_id is None:
        raise DocumentValidationError("No file or document ID provided")
    document = orchestrator.run_ocr(document_id, language)
    return OcrResultResponse(text=document.content or "", language=code, document_id=document.id)


@router.get("/languages", response_model=list[LanguageResponse])
def get_languages() -> list[dict[str, str]]:
    return list_languages()
