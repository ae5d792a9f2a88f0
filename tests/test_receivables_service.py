from __future__ import annotations

import json
from datetime import datetime
from decimal import Decimal
from pathlib import Path

import pytest
import requests
import responses

from factories import BASE_URL, account_payload, installment
from store_credit_sdk import ApiSession, AuthStore, load_config
from store_credit_sdk.payment_eligibility import AccountState
from store_credit_sdk.services.receivables_service import ReceivablesService, ReceivablesServiceError

NOW = datetime(2024, 6, 1, 9, 30)


@pytest.fixture
def service(store_env: str, tmp_path: Path) -> ReceivablesService:
    session = ApiSession(config=load_config(), auth_store=AuthStore(base_dir=tmp_path), token="token")
    return ReceivablesService(session, clock=lambda: NOW)


def _after_payment() -> dict:
    return account_payload(
        installments=[
            installment(1, "2024-01-10", 100.0, "PAID"),
            installment(2, "2024-02-10", 100.0, "PAID"),
            installment(3, "2024-03-10", 50.0, "OVERDUE"),
        ]
    )


@responses.activate
def test_load_account_snapshot(service: ReceivablesService) -> None:
    responses.add(responses.GET, f"{BASE_URL}/accounts-receivable/7", json=account_payload())
    snapshot = service.load_account(7)
    assert snapshot.summary.balance == Decimal("100")
    assert snapshot.summary.is_overdue is True
    assert snapshot.state is AccountState.OPEN
    assert snapshot.can_register_payment is True
    assert snapshot.is_fully_paid is False
    assert [item.is_late for item in snapshot.installments] == [False, False, True]
    assert snapshot.metrics.credit_start_date.isoformat() == "2023-12-10"
    assert snapshot.computed_at == NOW


@responses.activate
def test_register_payment_invalidates_and_refetches(service: ReceivablesService) -> None:
    responses.add(responses.GET, f"{BASE_URL}/accounts-receivable/7", json=account_payload())
    responses.add(responses.GET, f"{BASE_URL}/accounts-receivable/7", json=_after_payment())
    responses.add(
        responses.POST,
        f"{BASE_URL}/collections",
        json={"id": 91, "amount": 50.0, "collectionDate": "2024-06-01T09:30:00", "status": "EXITOSO"},
        status=201,
    )

    before = service.load_account(7)
    result = service.register_payment(7, amount="50", payment_method_id=2, reference_number="OP-1")

    assert before.summary.balance == Decimal("100")
    assert result.collection.id == 91
    assert result.snapshot.summary.balance == Decimal("50")
    assert [call.request.method for call in responses.calls] == ["GET", "POST", "GET"]
    body = json.loads(responses.calls[1].request.body)
    assert body["saleId"] == 55
    assert body["amount"] == 50.0
    assert body["referenceNumber"] == "OP-1"
    assert "Idempotency-Key" in responses.calls[1].request.headers

    # The cached pre-payment read was dropped, so the next load goes to the backend.
    assert service.load_account(7).summary.balance == Decimal("50")
    assert len(responses.calls) == 4


@responses.activate
def test_overpayment_is_rejected_locally(service: ReceivablesService) -> None:
    responses.add(responses.GET, f"{BASE_URL}/accounts-receivable/7", json=account_payload())
    with pytest.raises(ReceivablesServiceError) as excinfo:
        service.register_payment(7, amount="100.11", payment_method_id=2)
    assert excinfo.value.kind == "validation"
    assert "exceeds" in excinfo.value.message
    assert [call.request.method for call in responses.calls] == ["GET"]


@responses.activate
def test_overpayment_within_tolerance_is_sent(service: ReceivablesService) -> None:
    responses.add(responses.GET, f"{BASE_URL}/accounts-receivable/7", json=account_payload())
    responses.add(responses.POST, f"{BASE_URL}/collections", json={"id": 92, "amount": 100.05}, status=201)
    result = service.register_payment(7, amount="100.05", payment_method_id=2)
    assert result.collection.id == 92


@responses.activate
def test_cancelled_account_refuses_payment(service: ReceivablesService) -> None:
    responses.add(responses.GET, f"{BASE_URL}/accounts-receivable/7", json=account_payload(status="CANCELLED"))
    with pytest.raises(ReceivablesServiceError) as excinfo:
        service.register_payment(7, amount="10", payment_method_id=2)
    assert excinfo.value.kind == "validation"
    assert len(responses.calls) == 1


@responses.activate
def test_missing_account_surfaces_not_found(service: ReceivablesService, caplog: pytest.LogCaptureFixture) -> None:
    responses.add(
        responses.GET,
        f"{BASE_URL}/accounts-receivable/9",
        json={"status": 404, "error": "Not Found", "message": "Cuenta no encontrada"},
        status=404,
    )
    with pytest.raises(ReceivablesServiceError) as excinfo:
        service.load_account(9)
    assert excinfo.value.kind == "not_found"
    messages = [r.getMessage() for r in caplog.records if r.name.endswith("receivables_service")]
    record = json.loads(messages[-1])
    assert record["action"] == "load_account"
    assert record["outcome"] == "error:not_found"
    assert record["account_id"] == 9


@responses.activate
def test_network_failure_is_not_retried(service: ReceivablesService) -> None:
    responses.add(
        responses.GET,
        f"{BASE_URL}/accounts-receivable",
        body=requests.ConnectionError("connection refused"),
    )
    with pytest.raises(ReceivablesServiceError) as excinfo:
        service.list_accounts()
    assert excinfo.value.kind == "network"
    assert len(responses.calls) == 1


@responses.activate
def test_server_error_on_collection_keeps_snapshot_untouched(service: ReceivablesService) -> None:
    responses.add(responses.GET, f"{BASE_URL}/accounts-receivable/7", json=account_payload())
    responses.add(responses.POST, f"{BASE_URL}/collections", json={"message": "db down"}, status=500)
    before = service.load_account(7)
    with pytest.raises(ReceivablesServiceError) as excinfo:
        service.register_payment(7, amount="20", payment_method_id=2)
    assert excinfo.value.kind == "server"
    assert before.summary.balance == Decimal("100")
    assert [call.request.method for call in responses.calls] == ["GET", "POST"]


@responses.activate
def test_list_credit_accounts_filters_and_aggregates(service: ReceivablesService) -> None:
    responses.add(
        responses.GET,
        f"{BASE_URL}/accounts-receivable",
        json=[
            account_payload(1, sale_id=100),
            account_payload(2, sale_id=200, payment_condition="CONTADO"),
            account_payload(3, sale_id=300),
        ],
    )
    rows = service.list_credit_accounts("v-300")
    assert [row.account.id for row in rows] == [3]
    assert rows[0].summary.paid_amount == Decimal("200")


@responses.activate
def test_void_collection_refetches_account(service: ReceivablesService) -> None:
    responses.add(responses.DELETE, f"{BASE_URL}/collections/91", status=204)
    responses.add(responses.GET, f"{BASE_URL}/accounts-receivable/7", json=account_payload())
    snapshot = service.void_collection(7, 91)
    assert snapshot.summary.balance == Decimal("100")


@responses.activate
def test_issue_and_sign_credit_document(service: ReceivablesService) -> None:
    document = {"id": 4, "accountsReceivableId": 7, "type": "LETRA_CAMBIO", "amount": 100.0, "documentNumber": "L-9"}
    responses.add(responses.POST, f"{BASE_URL}/credit-documents", json=document, status=201)
    responses.add(
        responses.PATCH,
        f"{BASE_URL}/credit-documents/4/status?status=SIGNED",
        json={**document, "status": "SIGNED"},
    )
    issued = service.issue_credit_document(
        7,
        {
            "type": "LETRA_CAMBIO",
            "amount": "100",
            "document_number": "L-9",
            "issue_date": "2024-06-01",
            "due_date": "2025-06-01",
            "debtor_name": "Ana Torres",
            "debtor_id_number": "45678912",
        },
    )
    assert issued.accounts_receivable_id == 7
    assert service.sign_credit_document(4).status == "SIGNED"


def test_invalid_credit_document_fields_are_validation_errors(service: ReceivablesService) -> None:
    with pytest.raises(ReceivablesServiceError) as excinfo:
        service.issue_credit_document(7, {"type": "CHEQUE", "amount": "100"})
    assert excinfo.value.kind == "validation"
