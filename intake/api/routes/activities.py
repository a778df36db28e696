from fastapi import APIRouter, Depends, Query

from intake.api.deps import get_orchestrator
from intake.api.schemas import ActivityResponse
from intake.database.models import ActivityRecord
from intake.processor.orchestrator import DocumentOrchestrator

router = APIRouter(prefix="/activities", tags=["Activities"])


@router.get("/recent", response_model=list[ActivityResponse])
def list_recent_activities(
    limit: int = Query(5, ge=1, le=100),
    orchestrator: DocumentOrchestrator = Depends(get_orchestrator),
) -> list[ActivityRecord]:
    return orchestrator.list_recent_activities(limit)
