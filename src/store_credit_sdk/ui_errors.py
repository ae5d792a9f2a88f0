from __future__ import annotations

from dataclasses import dataclass

from .exceptions import (
    AmountExceedsBalanceError,
    ApiError,
    ClientValidationError,
    ForbiddenError,
    NotFoundError,
    ServerError,
    TransportError,
    UnauthorizedError,
    ValidationError,
)


@dataclass(frozen=True)
class UserFacingError:
    message: str
    kind: str
    details: str | None = None
    trace_id: str | None = None

    @property
    def is_terminal_view(self) -> bool:
        """A missing account replaces the view; everything else is a toast."""
        return self.kind == "not_found"


def error_kind(exc: Exception) -> str:
    if isinstance(exc, ClientValidationError):
        return "validation"
    if isinstance(exc, NotFoundError):
        return "not_found"
    if isinstance(exc, TransportError):
        return "network"
    if isinstance(exc, ServerError):
        return "server"
    if isinstance(exc, (UnauthorizedError, ForbiddenError)):
        return "auth"
    if isinstance(exc, ValidationError):
        return "validation"
    return "unknown"


def to_user_facing_error(exc: Exception) -> UserFacingError:
    kind = error_kind(exc)
    if isinstance(exc, AmountExceedsBalanceError):
        return UserFacingError(message="The amount exceeds the pending balance", kind=kind, details=str(exc))
    if isinstance(exc, ClientValidationError):
        return UserFacingError(message="Please review the payment form", kind=kind, details=str(exc))
    if isinstance(exc, ApiError):
        primary = exc.message.strip() or "Request failed"
        if kind == "not_found":
            primary = "The requested account could not be found"
        elif kind == "network":
            primary = "Could not reach the store service"
        details = f"{exc.code} (HTTP {exc.status_code})"
        if exc.details:
            details = f"{details}: {exc.details}"
        return UserFacingError(message=primary, kind=kind, details=details, trace_id=exc.trace_id)
    return UserFacingError(message=str(exc) or "Unexpected error", kind=kind)
