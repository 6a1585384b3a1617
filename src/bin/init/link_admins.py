"""
Script to attach the test franchise and branch admins to records they can manage.
Can be run via `python3 -m bin.init.link_admins`
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.append(str(Path(__file__).resolve().parents[2]))

from washdesk_shared.config import load_config, set_active_config  # noqa: E402
from washdesk_shared.constants import Tables  # noqa: E402
from washdesk_shared.supabase.client import get_service_db  # noqa: E402

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def find_admin_id(client, email):
    response = client.table(Tables.ADMINS).select("id").eq("email", email).limit(1).execute()
    return response.data[0]["id"] if response.data else None


def link_franchise_admin(client, admin_id):
    """Give the first franchise without an admin to ``admin_id``. Returns its id or None."""
    response = (
        client.table(Tables.FRANCHISES)
        .select("id, name, admin_id")
        .is_("admin_id", "null")
        .limit(1)
        .execute()
    )
    if not response.data:
        logger.warning("No franchise with a null admin_id found")
        return None

    franchise = response.data[0]
    client.table(Tables.FRANCHISES).update({"admin_id": admin_id}).eq(
        "id", franchise["id"]
    ).execute()
    logger.info(f"Linked franchise {franchise['name']} to admin {admin_id}")
    return franchise["id"]


def link_branch_admin(client, admin_id, email="branch@test.com"):
    """
    Give the first branch without an admin to ``admin_id``.

    When every branch already has an admin, a placeholder branch is created.
    """
    response = (
        client.table(Tables.BRANCHES)
        .select("id, name, admin_id")
        .is_("admin_id", "null")
        .limit(1)
        .execute()
    )
    if response.data:
        branch = response.data[0]
    else:
        logger.info("No branch with a null admin_id found; creating one")
        placeholder = {"name": f"Test Branch for {email}"}
        created = client.table(Tables.BRANCHES).insert(placeholder).execute()
        branch = created.data[0]

    client.table(Tables.BRANCHES).update({"admin_id": admin_id}).eq("id", branch["id"]).execute()
    logger.info(f"Linked branch {branch['name']} to admin {admin_id}")
    return branch["id"]


def main(argv=None):
    parser = argparse.ArgumentParser(description="Link the test admins to a franchise and branch")
    parser.add_argument("--franchise-email", default="franchise@test.com")
    parser.add_argument("--branch-email", default="branch@test.com")
    args = parser.parse_args(argv)

    try:
        set_active_config(load_config("link_script"))
        client = get_service_db()

        franchise_admin = find_admin_id(client, args.franchise_email)
        if franchise_admin:
            link_franchise_admin(client, franchise_admin)
        else:
            logger.error(f"No admin record for {args.franchise_email}")

        branch_admin = find_admin_id(client, args.branch_email)
        if branch_admin:
            link_branch_admin(client, branch_admin, args.branch_email)
        else:
            logger.error(f"No admin record for {args.branch_email}")

        if not (franchise_admin and branch_admin):
            sys.exit(1)
    except Exception as e:
        logger.error(f"Error linking admins: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
