from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Mapping

from pydantic import ValidationError as PydanticValidationError

from .exceptions import AmountExceedsBalanceError, ClientValidationError, ValidationIssue
from .models import AccountsReceivable, CollectionCreateRequest, ReceivableStatus
from .receivable_aggregation import coerce_account, paid_to_date

# Balance at or below this reads as settled.
PAID_EPSILON = Decimal("0.01")
# Overpayment accepted when registering a collection. Not the same as PAID_EPSILON.
OVERPAYMENT_TOLERANCE = Decimal("0.1")
MIN_PAYMENT_AMOUNT = Decimal("0.01")
EARLIEST_COLLECTION_DATE = date(1900, 1, 1)

AMOUNT_EXCEEDS_BALANCE = "AmountExceedsBalance"


class AccountState(str, Enum):
    OPEN = "OPEN"
    CLOSED = "CLOSED"


@dataclass(frozen=True)
class AmountValidation:
    valid: bool
    error: str | None = None


def _to_decimal(value: Decimal | float | int | str) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def account_balance(account: AccountsReceivable | Mapping[str, Any]) -> Decimal:
    ar = coerce_account(account)
    return ar.total_amount - paid_to_date(ar.installments)


def can_register_payment(account: AccountsReceivable | Mapping[str, Any]) -> bool:
    ar = coerce_account(account)
    return account_balance(ar) > PAID_EPSILON and ar.status != ReceivableStatus.CANCELLED.value


def account_state(account: AccountsReceivable | Mapping[str, Any]) -> AccountState:
    return AccountState.OPEN if can_register_payment(account) else AccountState.CLOSED


def is_fully_paid(account: AccountsReceivable | Mapping[str, Any]) -> bool:
    ar = coerce_account(account)
    return ar.status == ReceivableStatus.PAID.value or account_balance(ar) <= PAID_EPSILON


def validate_amount(amount: Decimal | float | str, balance: Decimal | float | str) -> AmountValidation:
    if _to_decimal(amount) > _to_decimal(balance) + OVERPAYMENT_TOLERANCE:
        return AmountValidation(valid=False, error=AMOUNT_EXCEEDS_BALANCE)
    return AmountValidation(valid=True)


def validate_collection_request(
    payload: CollectionCreateRequest | Mapping[str, Any],
    *,
    balance: Decimal | float | str,
    today: date,
) -> CollectionCreateRequest:
    """Apply the payment form's rules before anything is sent.

    Field problems raise ClientValidationError with every issue found; an
    otherwise valid amount above the balance tolerance raises
    AmountExceedsBalanceError.
    """
    request = _coerce_request(payload)
    issues: list[ValidationIssue] = []
    if request.amount < MIN_PAYMENT_AMOUNT:
        issues.append(ValidationIssue(field="amount", reason="amount must be greater than 0"))
    if request.payment_method_id <= 0:
        issues.append(ValidationIssue(field="payment_method_id", reason="a payment method is required"))
    collected_on = _calendar_day(request.collection_date)
    if collected_on > today:
        issues.append(ValidationIssue(field="collection_date", reason="collection date cannot be in the future"))
    if collected_on < EARLIEST_COLLECTION_DATE:
        issues.append(ValidationIssue(field="collection_date", reason="collection date is before 1900-01-01"))
    if issues:
        raise ClientValidationError(issues)

    pending = _to_decimal(balance)
    if not validate_amount(request.amount, pending).valid:
        raise AmountExceedsBalanceError(request.amount, pending)
    if request.reference_number is not None and not request.reference_number.strip():
        request = request.model_copy(update={"reference_number": None})
    return request


def _calendar_day(value: datetime) -> date:
    if value.tzinfo is not None:
        value = value.astimezone()
    return value.date()


def _coerce_request(payload: CollectionCreateRequest | Mapping[str, Any]) -> CollectionCreateRequest:
    if isinstance(payload, CollectionCreateRequest):
        return payload
    try:
        return CollectionCreateRequest.model_validate(payload)
    except PydanticValidationError as exc:
        field_names = {field.alias or name: name for name, field in CollectionCreateRequest.model_fields.items()}
        issues = [
            ValidationIssue(
                field=".".join(str(field_names.get(part, part)) for part in error.get("loc", ("payload",))),
                reason=error.get("msg", "invalid value"),
            )
            for error in exc.errors()
        ]
        raise ClientValidationError(issues or [ValidationIssue(field="payload", reason="invalid payload")]) from exc
