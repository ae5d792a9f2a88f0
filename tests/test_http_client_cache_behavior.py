from __future__ import annotations

import pytest
import responses

from factories import BASE_URL
from store_credit_sdk import load_config
from store_credit_sdk.exceptions import ServerError
from store_credit_sdk.http_client import TRACE_HEADER, HttpClient, TraceContext


def _client() -> HttpClient:
    return HttpClient(load_config(), trace=TraceContext())


@responses.activate
def test_get_responses_are_cached_until_invalidated(store_env) -> None:
    http = _client()
    responses.add(responses.GET, f"{BASE_URL}/accounts-receivable/7", json={"value": 1}, status=200)
    responses.add(responses.GET, f"{BASE_URL}/accounts-receivable/7", json={"value": 2}, status=200)

    assert http.request("GET", "/accounts-receivable/7") == {"value": 1}
    assert http.request("GET", "/accounts-receivable/7") == {"value": 1}
    assert len(responses.calls) == 1

    assert http.invalidate(["/accounts-receivable"]) == 1
    assert http.request("GET", "/accounts-receivable/7") == {"value": 2}
    assert len(responses.calls) == 2


@responses.activate
def test_successful_mutation_drops_matching_cache_entries(store_env) -> None:
    http = _client()
    responses.add(responses.GET, f"{BASE_URL}/accounts-receivable/7", json={"id": 7}, status=200)
    responses.add(responses.GET, f"{BASE_URL}/payment-methods", json=[], status=200)
    responses.add(responses.POST, f"{BASE_URL}/collections", json={"id": 1}, status=201)

    http.request("GET", "/accounts-receivable/7")
    http.request("GET", "/payment-methods")
    http.request("POST", "/collections", json_body={}, invalidate_paths=["/accounts-receivable"])

    assert len(http._cache or {}) == 1
    assert all("payment-methods" in key for key in http._cache)


@responses.activate
def test_failed_mutation_keeps_cache(store_env) -> None:
    http = _client()
    responses.add(responses.GET, f"{BASE_URL}/accounts-receivable/7", json={"id": 7}, status=200)
    responses.add(responses.POST, f"{BASE_URL}/collections", json={"message": "boom"}, status=500)

    http.request("GET", "/accounts-receivable/7")
    with pytest.raises(ServerError):
        http.request("POST", "/collections", json_body={}, invalidate_paths=["/accounts-receivable"])
    assert len(http._cache or {}) == 1


@responses.activate
def test_use_get_cache_false_skips_read_and_write(store_env) -> None:
    http = _client()
    responses.add(responses.GET, f"{BASE_URL}/accounts-receivable", json=[1], status=200)
    responses.add(responses.GET, f"{BASE_URL}/accounts-receivable", json=[2], status=200)

    assert http.request("GET", "/accounts-receivable", use_get_cache=False) == [1]
    assert http.request("GET", "/accounts-receivable", use_get_cache=False) == [2]
    assert http._cache == {}


@responses.activate
def test_trace_header_sent_and_adopted_from_response(store_env) -> None:
    http = _client()
    responses.add(
        responses.GET,
        f"{BASE_URL}/payment-methods",
        json=[],
        status=200,
        headers={TRACE_HEADER: "trace-from-server"},
    )
    http.request("GET", "/payment-methods")
    assert responses.calls[0].request.headers[TRACE_HEADER]
    assert http.trace.trace_id == "trace-from-server"
    assert http.last_operation is not None
    assert http.last_operation.result == "success"


@responses.activate
def test_retries_apply_to_reads_but_never_to_collections(store_env, monkeypatch) -> None:
    monkeypatch.setenv("STORE_RETRIES", "2")
    monkeypatch.setenv("STORE_RETRY_BACKOFF_SECONDS", "0")
    http = _client()
    responses.add(responses.GET, f"{BASE_URL}/payment-methods", json={"message": "busy"}, status=503)
    responses.add(responses.GET, f"{BASE_URL}/payment-methods", json=[], status=200)
    responses.add(responses.POST, f"{BASE_URL}/collections", json={"message": "boom"}, status=503)

    assert http.request("GET", "/payment-methods") == []
    assert len(responses.calls) == 2

    with pytest.raises(ServerError):
        http.request("POST", "/collections", json_body={})
    assert len(responses.calls) == 3
