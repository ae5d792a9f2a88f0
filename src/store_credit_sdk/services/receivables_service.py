from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Mapping

from pydantic import ValidationError as PydanticValidationError

from ..exceptions import ApiError, ClientValidationError
from ..models import (
    AccountsReceivable,
    Collection,
    CreditDocument,
    CreditDocumentStatus,
    PaymentMethodConfig,
    ReceivableStatus,
)
from ..observability import log_operation
from ..payment_eligibility import (
    AccountState,
    account_state,
    is_fully_paid,
    validate_collection_request,
)
from ..receivable_aggregation import (
    CreditMetrics,
    InstallmentBreakdown,
    ReceivableSummary,
    aggregate,
    credit_metrics,
    filter_credit_accounts,
    installment_breakdown,
)
from ..session import ApiSession
from ..ui_errors import to_user_facing_error

logger = logging.getLogger(__name__)

MODULE = "accounts_receivable"


@dataclass(frozen=True)
class AccountSnapshot:
    account: AccountsReceivable
    summary: ReceivableSummary
    state: AccountState
    is_fully_paid: bool
    installments: tuple[InstallmentBreakdown, ...]
    metrics: CreditMetrics
    computed_at: datetime

    @property
    def can_register_payment(self) -> bool:
        return self.state is AccountState.OPEN

    @property
    def is_cancelled(self) -> bool:
        return self.account.status == ReceivableStatus.CANCELLED.value


@dataclass(frozen=True)
class AccountListRow:
    account: AccountsReceivable
    summary: ReceivableSummary


@dataclass(frozen=True)
class PaymentResult:
    collection: Collection
    snapshot: AccountSnapshot


@dataclass
class ReceivablesServiceError(RuntimeError):
    message: str
    kind: str = "unknown"
    details: str | None = None
    trace_id: str | None = None

    def __str__(self) -> str:
        return self.message


class ReceivablesService:
    """Collection workflow on top of the resource clients.

    Every read returns an immutable snapshot. Mutations never patch a
    snapshot; they invalidate the shared GET cache and refetch the account.
    """

    def __init__(self, session: ApiSession, clock: Callable[[], datetime] = datetime.now) -> None:
        self.session = session
        self._clock = clock

    def load_account(self, account_id: int) -> AccountSnapshot:
        return self._fetch_snapshot(account_id, use_cache=True)

    def refresh_account(self, account_id: int) -> AccountSnapshot:
        return self._fetch_snapshot(account_id, use_cache=False)

    def load_account_for_sale(self, sale_id: int) -> AccountSnapshot:
        try:
            account = self.session.accounts_receivable_client().get_by_sale(sale_id)
        except Exception as exc:
            raise self._fail("load_account_for_sale", exc, sale_id=sale_id) from exc
        return self.snapshot(account)

    def list_accounts(self) -> list[AccountListRow]:
        try:
            accounts = self.session.accounts_receivable_client().list_accounts()
        except Exception as exc:
            raise self._fail("list_accounts", exc) from exc
        now = self._clock()
        return [AccountListRow(account=ar, summary=aggregate(ar, now)) for ar in accounts]

    def list_credit_accounts(self, search: str = "") -> list[AccountListRow]:
        rows = self.list_accounts()
        matches = {ar.id for ar in filter_credit_accounts([row.account for row in rows], search)}
        return [row for row in rows if row.account.id in matches]

    def payment_methods(self) -> list[PaymentMethodConfig]:
        try:
            return self.session.payment_methods_client().list_methods()
        except Exception as exc:
            raise self._fail("payment_methods", exc) from exc

    def register_payment(
        self,
        account_id: int,
        *,
        amount: Decimal | float | str,
        payment_method_id: int,
        reference_number: str | None = None,
        collection_date: datetime | None = None,
        idempotency_key: str | None = None,
    ) -> PaymentResult:
        current = self.load_account(account_id)
        if not current.can_register_payment:
            raise self._fail(
                "register_payment",
                ReceivablesServiceError(message="Account does not accept payments", kind="validation"),
                account_id=account_id,
            )
        if current.account.sale is None:
            raise self._fail(
                "register_payment",
                ReceivablesServiceError(message="Account has no sale to collect against", kind="validation"),
                account_id=account_id,
            )
        now = self._clock()
        try:
            request = validate_collection_request(
                {
                    "sale_id": current.account.sale.id,
                    "amount": amount,
                    "payment_method_id": payment_method_id,
                    "reference_number": reference_number,
                    "collection_date": collection_date or now.astimezone(),
                },
                balance=current.summary.balance,
                today=now.date(),
            )
            collection = self.session.collections_client().create_collection(
                request, idempotency_key=idempotency_key
            )
        except Exception as exc:
            raise self._fail("register_payment", exc, account_id=account_id) from exc
        log_operation(
            logger,
            MODULE,
            "register_payment",
            self._trace_id(),
            "success",
            account_id=account_id,
            collection_id=collection.id,
        )
        return PaymentResult(collection=collection, snapshot=self.refresh_account(account_id))

    def void_collection(self, account_id: int, collection_id: int) -> AccountSnapshot:
        try:
            self.session.collections_client().void_collection(collection_id)
        except Exception as exc:
            raise self._fail("void_collection", exc, account_id=account_id, collection_id=collection_id) from exc
        log_operation(
            logger,
            MODULE,
            "void_collection",
            self._trace_id(),
            "success",
            account_id=account_id,
            collection_id=collection_id,
        )
        return self.refresh_account(account_id)

    def credit_documents(self, account_id: int) -> list[CreditDocument]:
        try:
            return self.session.credit_documents_client().list_by_account(account_id)
        except Exception as exc:
            raise self._fail("credit_documents", exc, account_id=account_id) from exc

    def issue_credit_document(self, account_id: int, fields: Mapping[str, Any]) -> CreditDocument:
        payload = {**fields, "accounts_receivable_id": account_id}
        try:
            document = self.session.credit_documents_client().create_document(payload)
        except Exception as exc:
            raise self._fail("issue_credit_document", exc, account_id=account_id) from exc
        log_operation(logger, MODULE, "issue_credit_document", self._trace_id(), "success", document_id=document.id)
        return document

    def sign_credit_document(self, document_id: int) -> CreditDocument:
        try:
            return self.session.credit_documents_client().update_status(
                document_id, CreditDocumentStatus.SIGNED.value
            )
        except Exception as exc:
            raise self._fail("sign_credit_document", exc, document_id=document_id) from exc

    def snapshot(self, account: AccountsReceivable) -> AccountSnapshot:
        now = self._clock()
        return AccountSnapshot(
            account=account,
            summary=aggregate(account, now),
            state=account_state(account),
            is_fully_paid=is_fully_paid(account),
            installments=tuple(installment_breakdown(inst, now) for inst in account.installments),
            metrics=credit_metrics(account, now),
            computed_at=now,
        )

    def _fetch_snapshot(self, account_id: int, *, use_cache: bool) -> AccountSnapshot:
        try:
            account = self.session.accounts_receivable_client().get_account(account_id, use_cache=use_cache)
        except Exception as exc:
            raise self._fail("load_account", exc, account_id=account_id) from exc
        return self.snapshot(account)

    def _trace_id(self) -> str | None:
        return self.session.trace.trace_id if self.session.trace else None

    def _fail(self, action: str, exc: Exception, **context: Any) -> ReceivablesServiceError:
        error = self._normalize_error(exc)
        log_operation(
            logger,
            MODULE,
            action,
            error.trace_id or self._trace_id(),
            f"error:{error.kind}",
            **context,
        )
        return error

    @staticmethod
    def _normalize_error(exc: Exception) -> ReceivablesServiceError:
        if isinstance(exc, ReceivablesServiceError):
            return exc
        if isinstance(exc, (ApiError, ClientValidationError)):
            facing = to_user_facing_error(exc)
            return ReceivablesServiceError(
                message=facing.message,
                kind=facing.kind,
                details=facing.details,
                trace_id=facing.trace_id,
            )
        if isinstance(exc, PydanticValidationError):
            return ReceivablesServiceError(message="Invalid request payload", kind="validation", details=str(exc))
        return ReceivablesServiceError(message=str(exc) or "Accounts receivable client error")
