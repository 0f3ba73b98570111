"""Unit tests for CollectionProvisioner (get-or-create, reset, integrity checks)."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.interfaces.vector_store_provider import IVectorStoreProvider
from src.models.document import CollectionRef
from src.services.collection_provisioner import CollectionProvisioner
from src.utils.errors import DimensionMismatchError, ProvisioningError
from tests.conftest import FakeVectorStore


class TestResolve:
    @pytest.mark.asyncio
    async def test_creates_missing_collection(self, fake_store: FakeVectorStore) -> None:
        provisioner = CollectionProvisioner(fake_store, embedding_model="test-embed")

        ref = await provisioner.resolve("documents")

        assert ref.id
        assert fake_store.create_calls == 1
        assert fake_store.collections["documents"].metadata == {"embedding_model": "test-embed"}

    @pytest.mark.asyncio
    async def test_resolve_is_idempotent(self, fake_store: FakeVectorStore) -> None:
        provisioner = CollectionProvisioner(fake_store, embedding_model="test-embed")

        first = await provisioner.resolve("documents")
        second = await provisioner.resolve("documents")

        assert first.id == second.id
        assert fake_store.create_calls == 1
        assert len(fake_store.collections) == 1

    @pytest.mark.asyncio
    async def test_no_model_tag_without_embedding_model(self, fake_store: FakeVectorStore) -> None:
        await CollectionProvisioner(fake_store).resolve("documents")

        assert fake_store.collections["documents"].metadata == {}

    @pytest.mark.asyncio
    async def test_any_fetch_failure_falls_through_to_create(self) -> None:
        store = MagicMock(spec=IVectorStoreProvider)
        store.get_collection = AsyncMock(
            side_effect=ProvisioningError(message="connection reset", provider_name="chromadb")
        )
        store.create_collection = AsyncMock(
            return_value=CollectionRef(id="created", name="documents")
        )

        ref = await CollectionProvisioner(store).resolve("documents")

        assert ref.id == "created"
        store.create_collection.assert_awaited_once_with("documents", metadata=None)

    @pytest.mark.asyncio
    async def test_malformed_fetch_response_is_not_recreated(self) -> None:
        store = MagicMock(spec=IVectorStoreProvider)
        store.get_collection = AsyncMock(
            side_effect=ProvisioningError(
                message="received empty collection ID for 'documents'", status_code=200
            )
        )
        store.create_collection = AsyncMock()

        with pytest.raises(ProvisioningError, match="empty collection ID"):
            await CollectionProvisioner(store).resolve("documents")

        store.create_collection.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_create_failure_is_fatal(self) -> None:
        store = MagicMock(spec=IVectorStoreProvider)
        store.get_collection = AsyncMock(side_effect=ProvisioningError(status_code=500))
        store.create_collection = AsyncMock(
            side_effect=ProvisioningError(message="create failed", status_code=500)
        )

        with pytest.raises(ProvisioningError, match="create failed"):
            await CollectionProvisioner(store).resolve("documents")

    @pytest.mark.asyncio
    async def test_model_mismatch_rejected(self) -> None:
        store = MagicMock(spec=IVectorStoreProvider)
        store.get_collection = AsyncMock(
            return_value=CollectionRef(
                id="c-1", name="documents", metadata={"embedding_model": "old-model"}
            )
        )

        with pytest.raises(DimensionMismatchError, match="old-model"):
            await CollectionProvisioner(store, embedding_model="new-model").resolve("documents")

    @pytest.mark.asyncio
    async def test_untagged_collection_accepted(self) -> None:
        store = MagicMock(spec=IVectorStoreProvider)
        store.get_collection = AsyncMock(return_value=CollectionRef(id="c-1", name="documents"))

        ref = await CollectionProvisioner(store, embedding_model="new-model").resolve("documents")

        assert ref.id == "c-1"


class TestReset:
    @pytest.mark.asyncio
    async def test_reset_existing(self, fake_store: FakeVectorStore) -> None:
        provisioner = CollectionProvisioner(fake_store)
        await provisioner.resolve("documents")

        assert await provisioner.reset("documents") is True
        assert "documents" not in fake_store.collections

    @pytest.mark.asyncio
    async def test_reset_missing_collection_succeeds(self, fake_store: FakeVectorStore) -> None:
        assert await CollectionProvisioner(fake_store).reset("documents") is False

    @pytest.mark.asyncio
    async def test_resolve_after_reset_creates_new_collection(
        self, fake_store: FakeVectorStore
    ) -> None:
        provisioner = CollectionProvisioner(fake_store)
        before = await provisioner.resolve("documents")
        await provisioner.reset("documents")

        after = await provisioner.resolve("documents")

        assert after.id != before.id

    @pytest.mark.asyncio
    async def test_reset_failure_propagates(self) -> None:
        store = MagicMock(spec=IVectorStoreProvider)
        store.delete_collection = AsyncMock(side_effect=ProvisioningError(status_code=500))

        with pytest.raises(ProvisioningError):
            await CollectionProvisioner(store).reset("documents")


class TestCheckDimension:
    def test_matching_dimension(self) -> None:
        ref = CollectionRef(id="c-1", name="documents", dimension=3)

        CollectionProvisioner.check_dimension(ref, [0.1, 0.2, 0.3])

    def test_unknown_dimension_accepted(self) -> None:
        ref = CollectionRef(id="c-1", name="documents")

        CollectionProvisioner.check_dimension(ref, [0.1] * 1024)

    def test_mismatched_dimension(self) -> None:
        ref = CollectionRef(id="c-1", name="documents", dimension=768)

        with pytest.raises(DimensionMismatchError, match="768"):
            CollectionProvisioner.check_dimension(ref, [0.1] * 1024)

    def test_mismatch_is_a_provisioning_error(self) -> None:
        assert issubclass(DimensionMismatchError, ProvisioningError)
