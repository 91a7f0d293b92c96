# app/services/payment_gateway.py
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from app.domain.errors import UnsupportedProviderError


class PaymentProvider(str, Enum):
    CREDIT_CARD = "CREDIT_CARD"
    DEBIT_CARD = "DEBIT_CARD"
    PSE = "PSE"
    NEQUI = "NEQUI"
    DAVIPLATA = "DAVIPLATA"
    CASH_ON_DELIVERY = "CASH_ON_DELIVERY"


class PaymentStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    FAILED = "FAILED"


PROVIDER_NAMES = {
    PaymentProvider.CREDIT_CARD: "Credit card",
    PaymentProvider.DEBIT_CARD: "Debit card",
    PaymentProvider.PSE: "PSE",
    PaymentProvider.NEQUI: "Nequi",
    PaymentProvider.DAVIPLATA: "Daviplata",
    PaymentProvider.CASH_ON_DELIVERY: "Cash on delivery",
}


@dataclass(frozen=True)
class GatewayResult:
    status: PaymentStatus
    transaction_id: Optional[str]


class PaymentGateway(ABC):
    """Port do bramki platniczej. Zwraca status koncowy platnosci dla providera."""

    @abstractmethod
    def charge(self, provider: str, success: bool, transaction_id: Optional[str] = None) -> GatewayResult:
        ...


class SimulatedGateway(PaymentGateway):
    """
    Symulacja bez prawdziwej bramki: wynik podaje wywolujacy (success),
    brakujacy identyfikator transakcji generowany jako <PREFIX>-<ms>.
    Platnosc przy odbiorze zostaje PENDING.
    """

    def charge(self, provider: str, success: bool, transaction_id: Optional[str] = None) -> GatewayResult:
        try:
            provider = PaymentProvider(provider)
        except ValueError:
            raise UnsupportedProviderError(str(provider)) from None

        if provider == PaymentProvider.CASH_ON_DELIVERY:
            return GatewayResult(status=PaymentStatus.PENDING, transaction_id=None)

        status = PaymentStatus.APPROVED if success else PaymentStatus.FAILED
        return GatewayResult(status=status, transaction_id=transaction_id or self._transaction_id(provider))

    @staticmethod
    def _transaction_id(provider: PaymentProvider) -> str:
        millis = int(time.time() * 1000)
        if provider in (PaymentProvider.CREDIT_CARD, PaymentProvider.DEBIT_CARD):
            return f"TXN-{millis}"
        return f"{provider.value}-{millis}"
