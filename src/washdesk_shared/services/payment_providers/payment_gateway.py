"""Payment provider registry."""

from __future__ import annotations

from .base_provider import PaymentError, PaymentProvider
from .ledger_provider import LedgerProvider
from .stripe_provider import StripeProvider

PAYMENT_PROVIDERS = {
    "stripe": StripeProvider,
    "ledger": LedgerProvider,
}


def get_payment_provider(provider_name: str) -> PaymentProvider:
    """
    Get a payment provider instance by name.

    Raises:
        PaymentError: If provider is not supported
    """
    provider_name = provider_name.lower()

    if provider_name not in PAYMENT_PROVIDERS:
        supported = ", ".join(PAYMENT_PROVIDERS.keys())
        raise PaymentError(
            f"Payment provider '{provider_name}' not supported. Available providers: {supported}"
        )

    return PAYMENT_PROVIDERS[provider_name]()
