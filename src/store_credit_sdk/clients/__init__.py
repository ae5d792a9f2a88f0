from .accounts_receivable_client import AccountsReceivableClient
from .collections_client import CollectionsClient
from .credit_documents_client import CreditDocumentsClient
from .payment_methods_client import PaymentMethodsClient

__all__ = [
    "AccountsReceivableClient",
    "CollectionsClient",
    "CreditDocumentsClient",
    "PaymentMethodsClient",
]
