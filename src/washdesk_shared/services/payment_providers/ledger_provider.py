"""Payments recorded in the Supabase ``payments`` table."""

from __future__ import annotations

from typing import Any

from postgrest.exceptions import APIError

from washdesk_shared.constants import PaymentStatus, Tables
from washdesk_shared.logging_config import get_logger
from washdesk_shared.supabase.client import get_db

from .base_provider import PaymentError, PaymentProvider, PaymentRecord

logger = get_logger(__name__)


def payment_from_row(row: dict[str, Any]) -> PaymentRecord:
    return PaymentRecord(
        id=str(row["id"]),
        booking_id=str(row.get("booking_id") or "N/A"),
        amount=float(row.get("amount") or 0),
        status=row.get("status"),
        provider=row.get("provider") or "N/A",
        provider_txn_id=row.get("provider_txn_id"),
        created_at=row.get("created_at"),
    )


class LedgerProvider(PaymentProvider):
    """Read-mostly view over the payments table."""

    name = "ledger"

    def validate_configuration(self) -> bool:
        return True

    def list_payments(self) -> list[PaymentRecord]:
        try:
            response = (
                get_db()
                .table(Tables.PAYMENTS)
                .select("*")
                .order("created_at", desc=True)
                .execute()
            )
        except APIError as exc:
            logger.error(f"Error fetching payments table: {exc}")
            raise PaymentError("Failed to fetch payments") from exc
        return [payment_from_row(row) for row in response.data or []]

    def get_payment(self, payment_id: str) -> PaymentRecord | None:
        response = (
            get_db().table(Tables.PAYMENTS).select("*").eq("id", payment_id).limit(1).execute()
        )
        return payment_from_row(response.data[0]) if response.data else None

    def refund(self, payment_id: str, amount: float | None = None) -> dict[str, Any]:
        """Mark the ledger rows of a gateway payment as refunded."""
        response = (
            get_db()
            .table(Tables.PAYMENTS)
            .update({"status": PaymentStatus.REFUNDED.value})
            .eq("provider_txn_id", payment_id)
            .execute()
        )
        return {"payment_intent": payment_id, "updated": len(response.data or [])}
