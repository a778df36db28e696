from fastapi import APIRouter, Depends, Query

from intake.api.deps import get_orchestrator
from intake.api.schemas import AiAnalyzeRequest, AnalysisResponse
from intake.database.models import AnalysisRecord
from intake.processor.exceptions import DocumentValidationError
from intake.processor.orchestrator import DocumentOrchestrator

router = APIRouter(tags=["Analyses"])


@router.get("/analyses/recent", response_model=list[AnalysisResponse])
def list_recent_analyses(
    limit: int = Query(5, ge=1, le=100),
    orchestrator: DocumentOrchestrator = Depends(get_orchestrator),
) -> list[AnalysisRecord]:
    return orchestrator.list_recent_analyses(limit)


@router.post("/ai/analyze", response_model=AnalysisResponse)
def analyze(
    body: AiAnalyzeRequest,
    orchestrator: DocumentOrchestrator = Depends(get_orchestrator),
) -> AnalysisRecord:
    if body.document_id is None:
        raise DocumentValidationError("Document ID is required")
    return orchestrator.run_analysis(body.document_id, body.prompt)
