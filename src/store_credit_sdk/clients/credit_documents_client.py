from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ..models import CreditDocument, CreditDocumentCreateRequest
from .base import BaseClient, _as_object, _coerce_model

CREDIT_DOCUMENTS_PATH = "/credit-documents"


@dataclass
class CreditDocumentsClient(BaseClient):
    module: str = "credit_documents"

    def list_documents(self) -> list[CreditDocument]:
        return self._get_list(CREDIT_DOCUMENTS_PATH, CreditDocument, operation="list_documents")

    def list_by_account(self, account_id: int) -> list[CreditDocument]:
        return self._get_list(
            f"{CREDIT_DOCUMENTS_PATH}/ar/{account_id}",
            CreditDocument,
            operation="list_by_account",
        )

    def create_document(self, payload: CreditDocumentCreateRequest | Mapping[str, Any]) -> CreditDocument:
        request = _coerce_model(payload, CreditDocumentCreateRequest)
        data = self._request(
            "POST",
            CREDIT_DOCUMENTS_PATH,
            json_body=request.model_dump(mode="json", by_alias=True, exclude_none=True),
            operation="create_document",
            invalidate_paths=[CREDIT_DOCUMENTS_PATH],
        )
        return _as_object(data, CreditDocument, CREDIT_DOCUMENTS_PATH)

    def update_status(self, document_id: int, status: str) -> CreditDocument:
        path = f"{CREDIT_DOCUMENTS_PATH}/{document_id}/status"
        data = self._request(
            "PATCH",
            path,
            params={"status": status},
            operation="update_status",
            invalidate_paths=[CREDIT_DOCUMENTS_PATH],
        )
        return _as_object(data, CreditDocument, path)
