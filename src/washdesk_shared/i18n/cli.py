"""
Translation catalog maintenance.

Usage:
    washdesk-i18n compare
    washdesk-i18n add-missing
    washdesk-i18n unused [--remove]
    washdesk-i18n fix
"""

import argparse
import sys
from pathlib import Path

from washdesk_shared.i18n import MESSAGES_DIR, load_messages
from washdesk_shared.i18n import keys as catalog

_PACKAGE_DIR = Path(__file__).resolve().parents[1]
DEFAULT_SOURCE_ROOTS = (_PACKAGE_DIR, _PACKAGE_DIR.parent / "washdesk_admin")


def _report(source_roots, messages_dir):
    used = catalog.extract_used_keys(source_roots)
    return catalog.compare_keys(used, catalog.defined_keys(messages_dir))


def cmd_compare(args) -> int:
    report = _report(args.source, args.messages)
    summary = report["summary"]
    print("Translation keys")
    print("=" * 40)
    print(f"Used in code: {summary['used']}")
    for locale in catalog.LOCALES:
        print(f"Defined ({locale}): {summary[f'defined_{locale}']}")

    missing_any = False
    for locale, missing in report["missing"].items():
        if missing:
            missing_any = True
            print(f"\nMissing in {locale}:")
            for key in missing:
                print(f"  - {key}")
    for locale, unused in report["unused"].items():
        if unused:
            print(f"\nPossibly unused in {locale}:")
            for key in unused:
                print(f"  - {key}")
    return 1 if missing_any else 0


def cmd_add_missing(args) -> int:
    report = _report(args.source, args.messages)
    for locale in catalog.LOCALES:
        messages = catalog.read_catalog(locale, args.messages)
        added = catalog.add_missing_keys(messages, report["missing"][locale], locale)
        if added:
            catalog.write_catalog(locale, messages, args.messages)
        print(f"{locale}: added {len(added)} placeholder(s)")
    return 0


def cmd_unused(args) -> int:
    report = _report(args.source, args.messages)
    for locale in catalog.LOCALES:
        unused = report["unused"][locale]
        print(f"{locale}: {len(unused)} unused key(s)")
        for key in unused:
            print(f"  - {key}")
        if args.remove and unused:
            messages = catalog.read_catalog(locale, args.messages)
            removed = catalog.remove_unused_keys(messages, unused)
            catalog.write_catalog(locale, messages, args.messages)
            print(f"  removed {len(removed)}")
    return 0


def cmd_fix(args) -> int:
    for locale in catalog.LOCALES:
        catalog.fix_catalog(locale, args.messages)
        print(f"Rewrote {catalog.catalog_path(locale, args.messages)}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Check and repair the translation catalogs")
    parser.add_argument(
        "--messages", type=Path, default=MESSAGES_DIR, help="Directory holding <locale>.json"
    )
    parser.add_argument(
        "--source",
        type=Path,
        action="append",
        help="Source directory to scan (repeatable; defaults to the installed packages)",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("compare", help="Report missing and unused keys").set_defaults(
        func=cmd_compare
    )
    commands.add_parser("add-missing", help="Insert placeholders for missing keys").set_defaults(
        func=cmd_add_missing
    )
    unused = commands.add_parser("unused", help="List keys no code uses")
    unused.add_argument("--remove", action="store_true", help="Delete the unused keys")
    unused.set_defaults(func=cmd_unused)
    commands.add_parser("fix", help="Repair and reformat the catalogs").set_defaults(
        func=cmd_fix
    )
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.source:
        args.source = list(DEFAULT_SOURCE_ROOTS)
    status = args.func(args)
    load_messages.cache_clear()
    return status


if __name__ == "__main__":
    sys.exit(main())
