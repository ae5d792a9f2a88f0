from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel


class ReceivableStatus(str, Enum):
    ACTIVE = "ACTIVE"
    PAID = "PAID"
    CANCELLED = "CANCELLED"
    BAD_DEBT = "BAD_DEBT"


class InstallmentStatus(str, Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    OVERDUE = "OVERDUE"


class CollectionStatus(str, Enum):
    SUCCESSFUL = "EXITOSO"
    VOIDED = "ANULADO"


class PaymentCondition(str, Enum):
    CASH = "CONTADO"
    CREDIT = "CREDITO"


class CreditDocumentStatus(str, Enum):
    DRAFT = "DRAFT"
    SIGNED = "SIGNED"


class StoreModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True, alias_generator=to_camel)


class SaleReference(StoreModel):
    id: int
    client_id: int | None = None
    sale_date: datetime | date | None = None
    type: str | None = None
    total_amount: Decimal | None = None
    total_discount: Decimal | None = None
    status: str | None = None
    seller_id: int | None = None
    payment_condition: str | None = None


class PaymentMethodConfig(StoreModel):
    id: int
    name: str
    type: str | None = None


class Installment(StoreModel):
    id: int | None = None
    number: int
    due_date: date
    expected_amount: Decimal
    paid_amount: Decimal | None = None
    penalty_amount: Decimal | None = None
    paid_penalty: Decimal | None = None
    status: str = InstallmentStatus.PENDING.value

    @property
    def pending(self) -> Decimal:
        return self.expected_amount - (self.paid_amount or Decimal("0"))


class Collection(StoreModel):
    id: int
    amount: Decimal
    collection_date: datetime | date | None = None
    payment_method: PaymentMethodConfig | None = None
    reference_number: str | None = None
    status: str = CollectionStatus.SUCCESSFUL.value
    sale_id: int | None = None

    @property
    def is_voided(self) -> bool:
        return self.status == CollectionStatus.VOIDED.value


class AccountsReceivable(StoreModel):
    id: int
    total_amount: Decimal
    status: str = ReceivableStatus.ACTIVE.value
    sale: SaleReference | None = None
    installments: list[Installment] = Field(default_factory=list)
    collections: list[Collection] = Field(default_factory=list)

    @property
    def is_credit(self) -> bool:
        return self.sale is not None and self.sale.payment_condition == PaymentCondition.CREDIT.value


class CreditDocument(StoreModel):
    id: int
    accounts_receivable_id: int | None = None
    type: str
    amount: Decimal
    document_number: str
    issue_date: date | None = None
    due_date: date | None = None
    debtor_name: str | None = None
    debtor_id_number: str | None = None
    legal_notes: str | None = None
    status: str = CreditDocumentStatus.DRAFT.value


class CollectionCreateRequest(StoreModel):
    sale_id: int
    amount: Decimal
    payment_method_id: int
    reference_number: str | None = None
    collection_date: datetime

    @field_serializer("amount", when_used="json")
    def _amount_as_number(self, value: Decimal) -> float:
        return float(value)


class CreditDocumentCreateRequest(StoreModel):
    accounts_receivable_id: int
    type: Literal["PAGARE", "LETRA_CAMBIO"]
    amount: Decimal
    document_number: str = Field(min_length=1)
    issue_date: date
    due_date: date
    debtor_name: str = Field(min_length=1)
    debtor_id_number: str = Field(min_length=1)
    legal_notes: str | None = None

    @field_serializer("amount", when_used="json")
    def _amount_as_number(self, value: Decimal) -> float:
        return float(value)


class SessionData(BaseModel):
    access_token: str
    env_name: str | None = None
