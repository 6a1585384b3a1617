import json

import pytest

from washdesk_admin.scope_guard import guard_message
from washdesk_shared.i18n import cli, get_translator, keys, translate

SOURCE = '''
t = get_translator("admin.washers")
t("created")
t("errors.notFound")
t2 = get_translator("guard")
t("loginRequired")
t(f"{dynamic}")
'''


@pytest.fixture
def catalogs(tmp_path):
    messages = tmp_path / "messages"
    messages.mkdir()
    source = tmp_path / "src"
    source.mkdir()
    (source / "views.py").write_text(SOURCE, encoding="utf-8")
    en = {"admin": {"washers": {"created": "Washer created"}}, "old": {"key": "Old"}}
    ar = {"admin": {"washers": {"created": "تم"}}}
    (messages / "en.json").write_text(json.dumps(en), encoding="utf-8")
    (messages / "ar.json").write_text(json.dumps(ar), encoding="utf-8")
    return messages, source


def test_translate_with_fallback_and_params():
    assert translate("guard.loginRequired", "en") == "Please sign in to continue"
    assert translate("errors.invalidPreference", "en", key="theme") == "Unknown preference 'theme'"
    assert translate("no.such.key", "ar") == "no.such.key"
    t = get_translator("admin.washers", "en")
    assert t("created") == "Washer created"
    assert t("errors.notFound") == "Resource not found"


def test_extract_keys_uses_nearest_namespace():
    used = keys.extract_keys_from_source(SOURCE)
    assert used == {"admin.washers.created", "errors.notFound", "guard.loginRequired"}


def test_compare_reports_missing_and_unused(catalogs):
    messages, source = catalogs
    used = keys.extract_used_keys([source])
    report = keys.compare_keys(used, keys.defined_keys(messages))
    assert report["missing"]["en"] == ["errors.notFound", "guard.loginRequired"]
    assert report["unused"]["en"] == ["old.key"]
    assert report["unused"]["ar"] == []


def test_remove_key_prunes_empty_parents():
    messages = {"a": {"b": {"c": "x"}}, "d": "y"}
    assert keys.remove_key(messages, "a.b.c") is True
    assert messages == {"d": "y"}
    assert keys.remove_key(messages, "a.b.c") is False


def test_add_missing_keys_uses_locale_placeholder():
    messages = {"guard": {}}
    added = keys.add_missing_keys(messages, ["guard.loginRequired"], "ar")
    assert added == ["guard.loginRequired"]
    assert messages["guard"]["loginRequired"] == "[MISSING_AR] guard.loginRequired"


def test_repair_drops_duplicated_closing_brace():
    assert keys.repair_catalog_text('{"a": {"b": "c"}}}\n') == {"a": {"b": "c"}}
    assert keys.repair_catalog_text('{"a": {}}') == {"a": {}}


def test_cli_compare_fails_when_keys_are_missing(catalogs, capsys):
    messages, source = catalogs
    status = cli.main(["--messages", str(messages), "--source", str(source), "compare"])
    assert status == 1
    assert "Missing in en:" in capsys.readouterr().out


def test_cli_add_missing_then_compare_passes(catalogs):
    messages, source = catalogs
    args = ["--messages", str(messages), "--source", str(source)]
    assert cli.main(args + ["add-missing"]) == 0

    en = json.loads((messages / "en.json").read_text(encoding="utf-8"))
    assert en["guard"]["loginRequired"] == "[MISSING] guard.loginRequired"
    assert cli.main(args + ["compare"]) == 0


def test_cli_removes_unused_keys(catalogs):
    messages, source = catalogs
    cli.main(["--messages", str(messages), "--source", str(source), "unused", "--remove"])
    en = json.loads((messages / "en.json").read_text(encoding="utf-8"))
    assert "old" not in en


def test_shipped_catalogs_define_the_same_keys():
    defined = keys.defined_keys()
    assert defined["en"] == defined["ar"]


def test_shipped_keys_are_all_used_by_the_code():
    used = keys.extract_used_keys(cli.DEFAULT_SOURCE_ROOTS)
    report = keys.compare_keys(used, keys.defined_keys())
    assert report["unused"] == {"en": [], "ar": []}
    assert report["missing"] == {"en": [], "ar": []}


def test_guard_messages_are_translated():
    assert guard_message("branchOnly") == "Branch admins can only access the branch dashboard"
    assert guard_message("unknown") == "unknown"
