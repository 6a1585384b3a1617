"""
Row-level security policies for Supabase Storage.

Applied with direct SQL because the storage schema is not exposed through the
REST API. Every statement runs in its own transaction so that one failing
policy does not roll back the rest.
"""

from __future__ import annotations

import re
from typing import Any

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from washdesk_shared.config import get_active_config
from washdesk_shared.db import transaction
from washdesk_shared.logging_config import get_logger
from washdesk_shared.validation import ValidationError

logger = get_logger(__name__)

_BUCKET_RE = re.compile(r"^[a-z0-9_-]+$")

OWNER_UPDATE_POLICY = "Allow owners to update their own objects"
OWNER_DELETE_POLICY = "Allow owners to delete their own objects"


def _read_policy(bucket: str) -> str:
    return f"Allow public read access on {bucket} bucket"


def _insert_policy(bucket: str) -> str:
    return f"Allow authenticated uploads to {bucket} bucket"


def build_policy_statements(buckets: list[str]) -> list[tuple[str, str]]:
    """Return ``(label, sql)`` pairs in execution order."""
    for bucket in buckets:
        if not _BUCKET_RE.match(bucket):
            raise ValidationError(f"Invalid bucket name '{bucket}'")

    statements = [("enable_rls", "ALTER TABLE storage.objects ENABLE ROW LEVEL SECURITY")]
    for name in [_read_policy(b) for b in buckets] + [_insert_policy(b) for b in buckets]:
        statements.append((f"drop:{name}", f'DROP POLICY IF EXISTS "{name}" ON storage.objects'))
    for name in (OWNER_UPDATE_POLICY, OWNER_DELETE_POLICY):
        statements.append((f"drop:{name}", f'DROP POLICY IF EXISTS "{name}" ON storage.objects'))

    for bucket in buckets:
        statements.append(
            (
                _read_policy(bucket),
                f'CREATE POLICY "{_read_policy(bucket)}" ON storage.objects '
                f"FOR SELECT TO anon USING (bucket_id = '{bucket}')",
            )
        )
    for bucket in buckets:
        statements.append(
            (
                _insert_policy(bucket),
                f'CREATE POLICY "{_insert_policy(bucket)}" ON storage.objects '
                f"FOR INSERT TO authenticated WITH CHECK (bucket_id = '{bucket}')",
            )
        )
    statements.append(
        (
            OWNER_UPDATE_POLICY,
            f'CREATE POLICY "{OWNER_UPDATE_POLICY}" ON storage.objects FOR UPDATE '
            "TO authenticated USING (owner_id = auth.uid()::text) "
            "WITH CHECK (owner_id = auth.uid()::text)",
        )
    )
    statements.append(
        (
            OWNER_DELETE_POLICY,
            f'CREATE POLICY "{OWNER_DELETE_POLICY}" ON storage.objects FOR DELETE '
            "TO authenticated USING (owner_id = auth.uid()::text)",
        )
    )
    return statements


def fix_storage_policies(buckets: list[str] | None = None) -> dict[str, Any]:
    """Enable RLS on ``storage.objects`` and (re)create the bucket policies."""
    buckets = buckets or get_active_config().storage_buckets
    results = []
    for label, sql in build_policy_statements(buckets):
        try:
            with transaction() as connection:
                connection.execute(text(sql))
            results.append({"policy": label, "success": True, "error": None})
        except SQLAlchemyError as exc:
            logger.error(f"Error executing policy '{label}': {exc}")
            error = str(getattr(exc, "orig", None) or exc)
            results.append({"policy": label, "success": False, "error": error})

    failed = [item for item in results if not item["success"]]
    if failed:
        message = f"{len(failed)} of {len(results)} storage policy statements failed"
    else:
        message = "Storage policies applied successfully"
    logger.info(message)
    return {"success": not failed, "message": message, "results": results}
