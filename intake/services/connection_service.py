from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from intake.cloud_storage.base import BaseCloudStorage
from intake.config.settings import Settings
from intake.database.models import NewActivity, ServiceConnectionRecord
from intake.logging.logger import Log
from intake.notification.base import BaseNotifier
from intake.processor.exceptions import CapabilityError, ServiceConnectionNotFoundError
from intake.processor.models import ActivityType
from intake.store.base import BaseDocumentStore


class ConnectionStatus(str, Enum):
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"
    ERROR = "error"


@dataclass(frozen=True)
class ServiceProbe:
    """Display name plus a check that returns an error message, or None when reachable."""

    name: str
    check: Callable[[], str | None]


class ConnectionService:
    """Tracks connect/disconnect state of external integrations."""

    def __init__(self, store: BaseDocumentStore, probes: dict[str, ServiceProbe]) -> None:
        self._store = store
        self._probes = probes

    @property
    def service_types(self) -> list[str]:
        return list(self._probes)

    def list_connections(self) -> list[ServiceConnectionRecord]:
        return self._store.list_service_connections()

    def connect(self, service_type: str) -> ServiceConnectionRecord:
        """Verify the service and mark it connected.

        Raises:
            ServiceConnectionNotFoundError: if the service type is unknown.
            CapabilityError: if the verification fails; an existing record is set to ``error``.
        """
        probe = self._probe(service_type)
        existing = self._store.find_service_connection(service_type)
        problem = probe.check()
        if problem is not None:
            if existing is not None:
                self._store.update_service_connection(existing.id, ConnectionStatus.ERROR.value)
            Log.warning(f"Connecting to {probe.name} failed: {problem}")
            error = CapabilityError(f"Could not connect to {probe.name}: {problem}")
            error.capability = service_type
            raise error

        if existing is None:
            connection = self._store.create_service_connection(
                service_type, probe.name, ConnectionStatus.CONNECTED.value
            )
        else:
            connection = self._store.update_service_connection(
                existing.id, ConnectionStatus.CONNECTED.value
            )
        self._record(f"Connected to {probe.name}")
        return connection

    def disconnect(self, service_type: str) -> ServiceConnectionRecord:
        """Mark a previously connected service as disconnected.

        Raises:
            ServiceConnectionNotFoundError: if the type is unknown or was never connected.
        """
        probe = self._probe(service_type)
        existing = self._store.find_service_connection(service_type)
        if existing is None:
            raise ServiceConnectionNotFoundError(f"{probe.name} has never been connected")
        connection = self._store.update_service_connection(
            existing.id, ConnectionStatus.DISCONNECTED.value
        )
        self._record(f"Disconnected from {probe.name}")
        return connection

    def _probe(self, service_type: str) -> ServiceProbe:
        probe = self._probes.get(service_type)
        if probe is None:
            raise ServiceConnectionNotFoundError(
                f"Unknown service '{service_type}'. Choose from: {list(self._probes)}"
            )
        return probe

    def _record(self, description: str) -> None:
        self._store.create_activity(
            NewActivity(type=ActivityType.INTEGRATION.value, description=description)
        )
        Log.info(description)


def build_connection_service(
    settings: Settings,
    store: BaseDocumentStore,
    cloud_storage: BaseCloudStorage,
    notifier: BaseNotifier,
) -> ConnectionService:
    """Probe cloud storage and the notifier live; the analysis provider by configuration."""

    def check_cloud_storage() -> str | None:
        status = cloud_storage.status()
        if not status.configured:
            return "cloud storage is not configured"
        return None if status.connected else status.error or "cloud storage is unreachable"

    def check_notifier() -> str | None:
        status = notifier.status()
        if not status.configured:
            return "bot token or chat id is missing"
        return None if status.connected else status.error or "bot is unreachable"

    def check_analysis_provider() -> str | None:
        provider = settings.analysis_provider.lower()
        if provider == "openai" and not settings.analysis_openai_api_key:
            return "analysis_openai_api_key is not set"
        return None

    return ConnectionService(
        store,
        {
            "cloud_storage": ServiceProbe(cloud_storage.name, check_cloud_storage),
            "telegram": ServiceProbe(notifier.name, check_notifier),
            "openai": ServiceProbe("OpenAI", check_analysis_provider),
        },
    )
