import pytest

from intake.config.settings import Settings
from intake.store.factory import StoreFactory
from intake.store.memory_store import InMemoryDocumentStore
from intake.store.postgres_store import PostgresDocumentStore


class TestStoreFactory:
    def test_default_is_memory(self) -> None:
        assert isinstance(StoreFactory.create(Settings()), InMemoryDocumentStore)

    def test_creates_postgres_store(self) -> None:
        store = StoreFactory.create(Settings(store_backend="Postgres"))
        assert isinstance(store, PostgresDocumentStore)

    def test_unknown_backend_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown store backend 'sqlite'"):
            StoreFactory.create(Settings(store_backend="sqlite"))
