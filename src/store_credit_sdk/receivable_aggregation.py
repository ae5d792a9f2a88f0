"""Read-side aggregation over an accounts-receivable snapshot.

The backend owns every persisted number. These helpers only reproduce the
sums and date comparisons the admin views display, so list and detail views
agree with each other for the same snapshot and the same ``now``.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Mapping, Sequence

from .models import AccountsReceivable, Installment, InstallmentStatus

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")
_CENT = Decimal("0.01")
PENALTY_DISPLAY_EPSILON = Decimal("0.01")
_END_OF_DAY = time(23, 59, 59, 999000)


@dataclass(frozen=True)
class ReceivableSummary:
    paid_amount: Decimal
    balance: Decimal
    percentage: Decimal
    is_overdue: bool


@dataclass(frozen=True)
class InstallmentBreakdown:
    number: int
    due_date: date
    expected_capital: Decimal
    paid_capital: Decimal
    pending_capital: Decimal
    paid_penalty: Decimal
    pending_penalty: Decimal
    show_penalty: bool
    total_pending: Decimal
    is_late: bool


@dataclass(frozen=True)
class CreditMetrics:
    paid: Decimal
    balance: Decimal
    overdue_count: int
    first_due_date: date | None
    last_due_date: date | None
    credit_start_date: date | None
    total_penalty: Decimal
    progress: Decimal


def coerce_account(value: AccountsReceivable | Mapping[str, Any]) -> AccountsReceivable:
    if isinstance(value, AccountsReceivable):
        return value
    return AccountsReceivable.model_validate(value)


def paid_to_date(installments: Iterable[Installment]) -> Decimal:
    return sum((inst.paid_amount or _ZERO for inst in installments), _ZERO)


def percentage_paid(paid_amount: Decimal, total_amount: Decimal) -> Decimal:
    # A zero total reads as fully paid.
    if total_amount <= 0:
        return Decimal("100.00")
    return (paid_amount / total_amount * _HUNDRED).quantize(_CENT, rounding=ROUND_HALF_UP)


def end_of_due_day(due_date: date) -> datetime:
    return datetime.combine(due_date, _END_OF_DAY)


def _local_wall_time(now: datetime) -> datetime:
    if now.tzinfo is None:
        return now
    return now.astimezone().replace(tzinfo=None)


def is_past_due(due_date: date, now: datetime) -> bool:
    """True once ``now`` is strictly after the last millisecond of ``due_date``.

    The due date is a local calendar day, never shifted through UTC.
    """
    return _local_wall_time(now) > end_of_due_day(due_date)


def installment_is_overdue(installment: Installment, now: datetime) -> bool:
    if installment.status == InstallmentStatus.OVERDUE.value:
        return True
    if installment.status == InstallmentStatus.PAID.value:
        return False
    return is_past_due(installment.due_date, now)


def aggregate(account: AccountsReceivable | Mapping[str, Any], now: datetime) -> ReceivableSummary:
    ar = coerce_account(account)
    paid_amount = paid_to_date(ar.installments)
    return ReceivableSummary(
        paid_amount=paid_amount,
        balance=ar.total_amount - paid_amount,
        percentage=percentage_paid(paid_amount, ar.total_amount),
        is_overdue=any(installment_is_overdue(inst, now) for inst in ar.installments),
    )


def installment_breakdown(installment: Installment, now: datetime) -> InstallmentBreakdown:
    paid_penalty = installment.paid_penalty or _ZERO
    pending_penalty = installment.penalty_amount or _ZERO
    paid_capital = installment.paid_amount or _ZERO
    pending_capital = installment.expected_amount - paid_capital
    return InstallmentBreakdown(
        number=installment.number,
        due_date=installment.due_date,
        expected_capital=installment.expected_amount,
        paid_capital=paid_capital,
        pending_capital=pending_capital,
        paid_penalty=paid_penalty,
        pending_penalty=pending_penalty,
        show_penalty=paid_penalty + pending_penalty > PENALTY_DISPLAY_EPSILON,
        total_pending=pending_capital + pending_penalty,
        is_late=(
            installment.status != InstallmentStatus.PAID.value
            and is_past_due(installment.due_date, now)
        ),
    )


def one_month_before(value: date) -> date:
    year, month = (value.year - 1, 12) if value.month == 1 else (value.year, value.month - 1)
    day = min(value.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def credit_start_date(account: AccountsReceivable | Mapping[str, Any]) -> date | None:
    ar = coerce_account(account)
    if not ar.is_credit:
        return None
    first = next((inst for inst in ar.installments if inst.number == 1), None)
    if first is not None:
        return one_month_before(first.due_date)
    sale_date = ar.sale.sale_date if ar.sale else None
    if isinstance(sale_date, datetime):
        return sale_date.date()
    return sale_date


def credit_metrics(account: AccountsReceivable | Mapping[str, Any], now: datetime) -> CreditMetrics:
    ar = coerce_account(account)
    summary = aggregate(ar, now)
    ordered = sorted(ar.installments, key=lambda inst: inst.number)
    return CreditMetrics(
        paid=summary.paid_amount,
        balance=summary.balance,
        overdue_count=sum(1 for inst in ordered if installment_is_overdue(inst, now)),
        first_due_date=ordered[0].due_date if ordered else None,
        last_due_date=ordered[-1].due_date if ordered else None,
        credit_start_date=credit_start_date(ar),
        total_penalty=sum((inst.penalty_amount or _ZERO for inst in ordered), _ZERO),
        progress=summary.percentage,
    )


def filter_credit_accounts(
    accounts: Sequence[AccountsReceivable | Mapping[str, Any]],
    search: str = "",
) -> list[AccountsReceivable]:
    needle = search.strip().lower()
    matches: list[AccountsReceivable] = []
    for value in accounts:
        ar = coerce_account(value)
        if not ar.is_credit:
            continue
        sale = ar.sale
        haystack = f"V-{sale.id} AR-{ar.id} Client-{sale.client_id}".lower()
        if not needle or needle in haystack:
            matches.append(ar)
    return matches
