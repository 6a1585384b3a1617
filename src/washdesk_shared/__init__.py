"""Shared building blocks for the WashDesk administration services."""
