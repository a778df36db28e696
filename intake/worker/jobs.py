from dataclasses import dataclass


@dataclass(frozen=True)
class StageJob:
    """Background work for one document: OCR, optionally followed by analysis."""

    document_id: int
    language: str = "eng"
    cascade_analysis: bool = False
