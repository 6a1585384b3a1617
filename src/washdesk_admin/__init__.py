"""WashDesk administration API (general, franchise and branch dashboards)."""
