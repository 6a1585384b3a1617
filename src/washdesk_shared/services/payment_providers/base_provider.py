"""Base payment provider interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any


class PaymentError(Exception):
    """Raised when a payment gateway call fails."""


@dataclass
class PaymentRecord:
    """A payment as shown on the payments dashboard."""

    id: str
    booking_id: str
    amount: float
    status: str
    provider: str
    provider_txn_id: str | None
    created_at: str | None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class PaymentProvider(ABC):
    """Abstract base class for payment sources."""

    name: str = ""

    @abstractmethod
    def validate_configuration(self) -> bool:
        """
        Validate that the provider is properly configured.

        Raises:
            PaymentError: If configuration is invalid
        """

    @abstractmethod
    def list_payments(self) -> list[PaymentRecord]:
        """Most recent payments, newest first."""

    @abstractmethod
    def get_payment(self, payment_id: str) -> PaymentRecord | None:
        """A single payment, or None if it does not exist."""

    @abstractmethod
    def refund(self, payment_id: str, amount: float | None = None) -> dict[str, Any]:
        """
        Refund a payment fully, or partially when ``amount`` is given.

        Raises:
            PaymentError: If the refund is rejected
        """

    def _convert_to_cents(self, amount: Decimal | float) -> int:
        """Convert decimal amount to cents."""
        amount = Decimal(str(amount))
        return int(amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP) * 100)
