"""Payment providers: the Stripe gateway and the Supabase payments ledger."""

from .base_provider import PaymentError, PaymentProvider, PaymentRecord
from .payment_gateway import PAYMENT_PROVIDERS, get_payment_provider

__all__ = [
    "PAYMENT_PROVIDERS",
    "PaymentError",
    "PaymentProvider",
    "PaymentRecord",
    "get_payment_provider",
]
