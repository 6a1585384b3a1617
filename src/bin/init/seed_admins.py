"""
Script to create the three test admin accounts (general, franchise, branch).
Can be run via `python3 -m bin.init.seed_admins [--password PASSWORD]`
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.append(str(Path(__file__).resolve().parents[2]))

from washdesk_shared.auth.service import AuthError, provision_admin  # noqa: E402
from washdesk_shared.config import load_config, set_active_config  # noqa: E402

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

TEST_ADMINS = (
    ("general@test.com", "General Admin", "general"),
    ("franchise@test.com", "Franchise Admin", "franchise"),
    ("branch@test.com", "Branch Admin", "branch"),
)


def seed_test_admins(password: str) -> dict[str, str]:
    """Create (or reuse) each test admin and return ``{email: user_id}``."""
    created = {}
    for email, name, role in TEST_ADMINS:
        try:
            created[email] = provision_admin(email, password, role, name)
            logger.info(f"Seeded {role} admin: {email}")
        except AuthError as e:
            logger.error(f"Error seeding {email}: {e.message}")
    return created


def main(argv=None):
    parser = argparse.ArgumentParser(description="Create the WashDesk test admins")
    parser.add_argument("--password", default="password123")
    args = parser.parse_args(argv)

    try:
        set_active_config(load_config("seed_script"))
        created = seed_test_admins(args.password)
        if len(created) != len(TEST_ADMINS):
            sys.exit(1)
        logger.info("Admin seed completed successfully!")
    except Exception as e:
        logger.error(f"Error seeding admins: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
