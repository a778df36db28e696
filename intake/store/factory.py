from intake.config.settings import Settings
from intake.store.base import BaseDocumentStore
from intake.store.memory_store import InMemoryDocumentStore
from intake.store.postgres_store import PostgresDocumentStore


class StoreFactory:
    """Creates the configured document store.

    The postgres backend expects ``init_pool`` to have been called.
    """

    BACKENDS: dict[str, type[BaseDocumentStore]] = {
        "memory": InMemoryDocumentStore,
        "postgres": PostgresDocumentStore,
    }

    @classmethod
    def create(cls, settings: Settings) -> BaseDocumentStore:
        backend = settings.store_backend.lower()
        store_cls = cls.BACKENDS.get(backend)
        if store_cls is None:
            raise ValueError(
                f"Unknown store backend '{backend}'. Choose from: {list(cls.BACKENDS)}"
            )
        return store_cls()
