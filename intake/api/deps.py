from fastapi import Request

from intake.config.settings import Settings
from intake.processor.orchestrator import DocumentOrchestrator
from intake.services.connection_service import ConnectionService


def get_settings(request: Request) -> Settings:
    settings: Settings = request.app.state.settings
    return settings


def get_orchestrator(request: Request) -> DocumentOrchestrator:
    orchestrator: DocumentOrchestrator = request.app.state.orchestrator
    return orchestrator


def get_connection_service(request: Request) -> ConnectionService:
    connections: ConnectionService = request.app.state.connections
    return connections
