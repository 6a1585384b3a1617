"""Stripe payment provider implementation."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import stripe

from washdesk_shared.config import get_active_config
from washdesk_shared.datetime_utils import utcnow
from washdesk_shared.logging_config import get_logger

from .base_provider import PaymentError, PaymentProvider, PaymentRecord

logger = get_logger(__name__)

LIST_LIMIT = 100

# (id, booking, amount, status, days ago) served when STRIPE_SANDBOX_MODE is on
SANDBOX_INTENTS = (
    ("pi_mock_1", "BK001", 49.99, "succeeded", 0),
    ("pi_mock_2", "BK002", 79.99, "pending", 1),
    ("pi_mock_3", "BK003", 39.99, "failed", 2),
    ("pi_mock_4", "BK004", 59.99, "refunded", 3),
)


def payment_from_intent(intent: Any) -> PaymentRecord:
    """Map a Stripe PaymentIntent onto the dashboard payment shape."""
    metadata = getattr(intent, "metadata", None) or {}
    booking_id = metadata["bookingId"] if "bookingId" in metadata else None
    created = getattr(intent, "created", None)
    created_at = (
        datetime.fromtimestamp(created, tz=timezone.utc).isoformat() if created else None
    )
    return PaymentRecord(
        id=intent.id,
        booking_id=booking_id or "N/A",
        amount=(intent.amount or 0) / 100,
        status=intent.status,
        provider="Stripe",
        provider_txn_id=intent.id,
        created_at=created_at,
    )


class StripeProvider(PaymentProvider):
    """Stripe payment gateway provider."""

    name = "stripe"

    def __init__(self) -> None:
        config = get_active_config()
        self.api_key = config.stripe_secret_key
        self.sandbox = config.stripe_sandbox_mode

    def validate_configuration(self) -> bool:
        if not self.api_key and not self.sandbox:
            raise PaymentError("Stripe not configured")
        stripe.api_key = self.api_key
        return True

    def _sandbox_records(self) -> list[PaymentRecord]:
        now = utcnow()
        return [
            PaymentRecord(
                id=intent_id,
                booking_id=booking_id,
                amount=amount,
                status=status,
                provider="Stripe",
                provider_txn_id=intent_id,
                created_at=(now - timedelta(days=days)).isoformat(),
            )
            for intent_id, booking_id, amount, status, days in SANDBOX_INTENTS
        ]

    def list_payments(self) -> list[PaymentRecord]:
        self.validate_configuration()
        if self.sandbox:
            return self._sandbox_records()

        try:
            intents = stripe.PaymentIntent.list(limit=LIST_LIMIT)
        except stripe.AuthenticationError as exc:
            logger.error(f"Stripe authentication failed: {exc}")
            raise PaymentError("Stripe authentication failed") from exc
        except stripe.StripeError as exc:
            logger.error(f"Error fetching Stripe payments: {exc}")
            raise PaymentError(f"Failed to fetch payments: {exc.user_message or exc}") from exc

        return [payment_from_intent(intent) for intent in intents.data]

    def get_payment(self, payment_id: str) -> PaymentRecord | None:
        self.validate_configuration()
        if self.sandbox:
            return next((r for r in self._sandbox_records() if r.id == payment_id), None)

        try:
            intent = stripe.PaymentIntent.retrieve(payment_id)
        except stripe.InvalidRequestError as exc:
            logger.warning(f"Stripe payment {payment_id} not found: {exc}")
            return None
        except stripe.StripeError as exc:
            logger.error(f"Error fetching Stripe payment {payment_id}: {exc}")
            raise PaymentError(f"Failed to fetch payment: {exc.user_message or exc}") from exc
        return payment_from_intent(intent)

    def refund(self, payment_id: str, amount: float | None = None) -> dict[str, Any]:
        self.validate_configuration()
        amount_cents = self._convert_to_cents(amount) if amount is not None else None
        if self.sandbox:
            return {
                "id": f"re_mock_{payment_id}",
                "payment_intent": payment_id,
                "amount": amount_cents,
                "status": "succeeded",
            }

        params: dict[str, Any] = {"payment_intent": payment_id}
        if amount_cents is not None:
            params["amount"] = amount_cents
        try:
            refund = stripe.Refund.create(**params)
        except stripe.InvalidRequestError as exc:
            logger.warning(f"Stripe rejected refund of {payment_id}: {exc}")
            raise PaymentError(f"Refund rejected: {exc.user_message or exc}") from exc
        except stripe.StripeError as exc:
            logger.error(f"Stripe refund of {payment_id} failed: {exc}")
            raise PaymentError(f"Refund failed: {exc.user_message or exc}") from exc

        logger.info(f"Refunded {payment_id} (refund {refund.id})")
        return {
            "id": refund.id,
            "payment_intent": payment_id,
            "amount": refund.amount,
            "status": refund.status,
        }
