from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ..models import Collection, CollectionCreateRequest
from .accounts_receivable_client import ACCOUNTS_RECEIVABLE_PATH
from .base import BaseClient, _as_object, _coerce_model, new_idempotency_key

COLLECTIONS_PATH = "/collections"
# Cached reads that go stale once a collection is created or voided.
_STALE_AFTER_COLLECTION = [ACCOUNTS_RECEIVABLE_PATH, COLLECTIONS_PATH, "/sales"]


@dataclass
class CollectionsClient(BaseClient):
    module: str = "collections"

    def list_collections(self) -> list[Collection]:
        return self._get_list(COLLECTIONS_PATH, Collection, operation="list_collections")

    def list_by_sale(self, sale_id: int) -> list[Collection]:
        return self._get_list(f"{COLLECTIONS_PATH}/sale/{sale_id}", Collection, operation="list_by_sale")

    def create_collection(
        self,
        payload: CollectionCreateRequest | Mapping[str, Any],
        idempotency_key: str | None = None,
    ) -> Collection:
        request = _coerce_model(payload, CollectionCreateRequest)
        data = self._request(
            "POST",
            COLLECTIONS_PATH,
            json_body=request.model_dump(mode="json", by_alias=True, exclude_none=True),
            headers={"Idempotency-Key": idempotency_key or new_idempotency_key()},
            operation="create_collection",
            invalidate_paths=_STALE_AFTER_COLLECTION,
        )
        return _as_object(data, Collection, COLLECTIONS_PATH)

    def void_collection(self, collection_id: int) -> None:
        self._request(
            "DELETE",
            f"{COLLECTIONS_PATH}/{collection_id}",
            operation="void_collection",
            invalidate_paths=_STALE_AFTER_COLLECTION,
        )
