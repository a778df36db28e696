from fastapi import APIRouter, Depends

from intake.api.deps import get_orchestrator
from intake.api.schemas import StatsResponse
from intake.database.models import Stats
from intake.processor.orchestrator import DocumentOrchestrator

router = APIRouter(tags=["Stats"])


@router.get("/stats", response_model=StatsResponse)
def get_stats(orchestrator: DocumentOrchestrator = Depends(get_orchestrator)) -> Stats:
    return orchestrator.get_stats()
