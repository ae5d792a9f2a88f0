from __future__ import annotations

from dataclasses import dataclass

from ..models import AccountsReceivable, Installment
from .base import BaseClient

ACCOUNTS_RECEIVABLE_PATH = "/accounts-receivable"


@dataclass
class AccountsReceivableClient(BaseClient):
    module: str = "accounts_receivable"

    def list_accounts(self, *, use_cache: bool = True) -> list[AccountsReceivable]:
        return self._get_list(
            ACCOUNTS_RECEIVABLE_PATH,
            AccountsReceivable,
            operation="list_accounts",
            use_get_cache=use_cache,
        )

    def get_account(self, account_id: int, *, use_cache: bool = True) -> AccountsReceivable:
        return self._get_object(
            f"{ACCOUNTS_RECEIVABLE_PATH}/{account_id}",
            AccountsReceivable,
            operation="get_account",
            use_get_cache=use_cache,
        )

    def get_by_sale(self, sale_id: int, *, use_cache: bool = True) -> AccountsReceivable:
        return self._get_object(
            f"{ACCOUNTS_RECEIVABLE_PATH}/sale/{sale_id}",
            AccountsReceivable,
            operation="get_by_sale",
            use_get_cache=use_cache,
        )

    def get_installments(self, account_id: int) -> list[Installment]:
        return self._get_list(
            f"{ACCOUNTS_RECEIVABLE_PATH}/{account_id}/installments",
            Installment,
            operation="get_installments",
        )
