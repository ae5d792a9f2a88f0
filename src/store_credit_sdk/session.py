from __future__ import annotations

from dataclasses import dataclass, field

from .auth_store import AuthStore
from .clients.accounts_receivable_client import AccountsReceivableClient
from .clients.collections_client import CollectionsClient
from .clients.credit_documents_client import CreditDocumentsClient
from .clients.payment_methods_client import PaymentMethodsClient
from .config import ClientConfig
from .http_client import HttpClient, TraceContext
from .models import SessionData


@dataclass
class ApiSession:
    """Owns one HttpClient so every resource client shares its GET cache.

    Sharing the cache is what lets a collection POST invalidate the account
    reads made through a different client.
    """

    config: ClientConfig
    auth_store: AuthStore | None = None
    trace: TraceContext | None = None
    token: str | None = None
    http: HttpClient | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        self.auth_store = self.auth_store or AuthStore()
        self.trace = self.trace or TraceContext()
        if self.http is None:
            self.http = HttpClient(config=self.config, trace=self.trace)
        if not self.token:
            stored = self.auth_store.load(self.config.normalized_env)
            if stored:
                self.token = stored.access_token

    def accounts_receivable_client(self) -> AccountsReceivableClient:
        return AccountsReceivableClient(http=self.http, access_token=self.token)

    def collections_client(self) -> CollectionsClient:
        return CollectionsClient(http=self.http, access_token=self.token)

    def credit_documents_client(self) -> CreditDocumentsClient:
        return CreditDocumentsClient(http=self.http, access_token=self.token)

    def payment_methods_client(self) -> PaymentMethodsClient:
        return PaymentMethodsClient(http=self.http, access_token=self.token)

    def establish(self, access_token: str) -> None:
        self.token = access_token
        self.http.clear_cache()
        self.auth_store.save(SessionData(access_token=access_token, env_name=self.config.normalized_env))

    def clear(self) -> None:
        self.token = None
        self.http.clear_cache()
        self.auth_store.clear(self.config.normalized_env)
