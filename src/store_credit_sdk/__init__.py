from .auth_store import AuthStore
from .config import ClientConfig, ConfigError, load_config
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
    ValidationIssue,
)
from .http_client import HttpClient, TraceContext
from .models import (
    AccountsReceivable,
    Collection,
    CollectionCreateRequest,
    CreditDocument,
    CreditDocumentCreateRequest,
    Installment,
    PaymentMethodConfig,
    ReceivableStatus,
    SaleReference,
)
from .payment_eligibility import (
    AccountState,
    AmountValidation,
    can_register_payment,
    validate_amount,
    validate_collection_request,
)
from .receivable_aggregation import ReceivableSummary, aggregate, credit_metrics, installment_breakdown
from .session import ApiSession
from .ui_errors import UserFacingError, to_user_facing_error

__version__ = "0.3.0"

__all__ = [
    "AccountState",
    "AccountsReceivable",
    "AmountExceedsBalanceError",
    "AmountValidation",
    "ApiError",
    "ApiSession",
    "AuthStore",
    "ClientConfig",
    "ClientValidationError",
    "Collection",
    "CollectionCreateRequest",
    "ConfigError",
    "CreditDocument",
    "CreditDocumentCreateRequest",
    "ForbiddenError",
    "HttpClient",
    "Installment",
    "NotFoundError",
    "PaymentMethodConfig",
    "ReceivableStatus",
    "ReceivableSummary",
    "SaleReference",
    "ServerError",
    "TraceContext",
    "TransportError",
    "UnauthorizedError",
    "UserFacingError",
    "ValidationError",
    "ValidationIssue",
    "aggregate",
    "can_register_payment",
    "credit_metrics",
    "installment_breakdown",
    "load_config",
    "to_user_facing_error",
    "validate_amount",
    "validate_collection_request",
]
