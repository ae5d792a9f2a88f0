from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass
class ApiError(Exception):
    code: str
    message: str
    details: object | None
    trace_id: str | None
    status_code: int
    raw_payload: object | None = None

    def __str__(self) -> str:
        trace = f" trace_id={self.trace_id}" if self.trace_id else ""
        return f"[{self.status_code}] {self.code}: {self.message}{trace}"


class UnauthorizedError(ApiError):
    pass


class ForbiddenError(ApiError):
    pass


class NotFoundError(ApiError):
    """The account, collection or document id does not exist."""


class ValidationError(ApiError):
    pass


class AuthError(UnauthorizedError):
    """Bearer token missing, expired or rejected."""


class PermissionError(ForbiddenError):
    """Authenticated user may not touch this resource."""


class ConflictError(ApiError):
    """409 or conflict-style errors."""


class RateLimitError(ApiError):
    """429 throttling error."""


class ServerError(ApiError):
    """5xx server-side failures."""


class TransportError(ApiError):
    """Network failure before an HTTP response was returned."""


@dataclass(frozen=True)
class ValidationIssue:
    field: str
    reason: str


class ClientValidationError(ValueError):
    """Local validation failed; nothing was sent to the backend."""

    def __init__(self, issues: list[ValidationIssue]) -> None:
        self.issues = issues
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if not self.issues:
            return "Validation failed"
        return "; ".join(f"{issue.field}: {issue.reason}" for issue in self.issues)


class AmountExceedsBalanceError(ClientValidationError):
    def __init__(self, amount: Decimal, balance: Decimal) -> None:
        self.amount = amount
        self.balance = balance
        super().__init__(
            [ValidationIssue(field="amount", reason=f"amount {amount} exceeds pending balance {balance}")]
        )
