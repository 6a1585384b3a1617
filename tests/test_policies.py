import pytest

from washdesk_shared.supabase import policies
from washdesk_shared.validation import ValidationError


def test_statements_drop_before_create():
    statements = policies.build_policy_statements(["images", "branches"])
    labels = [label for label, _ in statements]

    assert labels[0] == "enable_rls"
    first_create = next(i for i, (label, _) in enumerate(statements) if ":" not in label
                        and label != "enable_rls")
    assert all(label.startswith("drop:") for label in labels[1:first_create])
    assert len([label for label in labels if label.startswith("drop:")]) == 6


def test_statements_scope_policies_to_their_bucket():
    statements = dict(policies.build_policy_statements(["branches"]))
    read_sql = statements["Allow public read access on branches bucket"]
    assert "FOR SELECT TO anon" in read_sql
    assert "bucket_id = 'branches'" in read_sql
    assert "auth.uid()" in statements[policies.OWNER_DELETE_POLICY]


def test_bucket_names_are_validated():
    with pytest.raises(ValidationError):
        policies.build_policy_statements(["images'; drop table x; --"])


def test_failed_statements_are_reported_individually():
    # sqlite has no storage schema, so every statement fails on its own
    result = policies.fix_storage_policies(["images"])
    assert result["success"] is False
    assert len(result["results"]) == len(policies.build_policy_statements(["images"]))
    assert all(item["error"] for item in result["results"])
