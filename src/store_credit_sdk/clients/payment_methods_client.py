from __future__ import annotations

from dataclasses import dataclass

from ..models import PaymentMethodConfig
from .base import BaseClient

PAYMENT_METHODS_PATH = "/payment-methods"


@dataclass
class PaymentMethodsClient(BaseClient):
    module: str = "payment_methods"

    def list_methods(self) -> list[PaymentMethodConfig]:
        return self._get_list(PAYMENT_METHODS_PATH, PaymentMethodConfig, operation="list_methods")
