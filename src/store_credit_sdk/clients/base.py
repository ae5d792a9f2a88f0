from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any, TypeVar

from pydantic import BaseModel

from ..http_client import HttpClient

ModelT = TypeVar("ModelT", bound=BaseModel)


@dataclass
class BaseClient:
    http: HttpClient
    access_token: str | None = None
    module: str = "store"

    def _auth_headers(self) -> dict[str, str]:
        headers: dict[str, str] = {}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        return headers

    def _request(self, method: str, path: str, **kwargs):
        headers = kwargs.pop("headers", {})
        merged = {**self._auth_headers(), **headers}
        kwargs.setdefault("module", self.module)
        return self.http.request(method, path, headers=merged, **kwargs)

    def _get_object(self, path: str, model_type: type[ModelT], **kwargs: Any) -> ModelT:
        data = self._request("GET", path, **kwargs)
        return _as_object(data, model_type, path)

    def _get_list(self, path: str, model_type: type[ModelT], **kwargs: Any) -> list[ModelT]:
        data = self._request("GET", path, **kwargs)
        if data is None:
            return []
        if not isinstance(data, list):
            raise ValueError(f"Expected {path} response to be a JSON array")
        return [model_type.model_validate(item) for item in data]


def new_idempotency_key() -> str:
    return str(uuid.uuid4())


def _as_object(data: Any, model_type: type[ModelT], path: str) -> ModelT:
    if not isinstance(data, dict):
        raise ValueError(f"Expected {path} response to be a JSON object")
    return model_type.model_validate(data)


def _coerce_model(value: Any, model_type: type[ModelT]) -> ModelT:
    if isinstance(value, model_type):
        return value
    return model_type.model_validate(value)
