"""
Supabase client accessors.

Three flavours of client are used:

- ``SupabaseClients.service()``: service-role key, bypasses row-level
  security. Reserved for privileged server actions (admin user creation,
  booking status changes, product and order writes, bucket bootstrap).
- ``SupabaseClients.anon()``: anon key, used for password sign-in.
- ``SupabaseClients.for_user(token)``: anon key plus the caller's access
  token so that RLS policies see ``auth.uid()``.

Request handlers should call :func:`get_db`, which picks the user-scoped
client inside a request and the service client elsewhere.
"""

from __future__ import annotations

import httpx
from flask import g, has_request_context
from postgrest.exceptions import APIError
from supabase import Client, ClientOptions, create_client

from washdesk_shared.config import get_active_config
from washdesk_shared.logging_config import get_logger

logger = get_logger(__name__)

# raised by a query that PostgREST rejects or that never reaches it
QUERY_ERRORS = (APIError, httpx.HTTPError)


class SupabaseNotConfigured(RuntimeError):
    """Raised when the Supabase URL or keys are missing."""


class SupabaseClients:
    """Process-wide cache of Supabase clients."""

    _service_client: Client | None = None
    _anon_client: Client | None = None

    @classmethod
    def service(cls) -> Client:
        if cls._service_client is None:
            config = get_active_config()
            if not config.supabase_url or not config.supabase_service_role_key:
                raise SupabaseNotConfigured("Supabase service role credentials missing")
            cls._service_client = create_client(
                config.supabase_url, config.supabase_service_role_key
            )
            logger.info("Supabase service client initialized")
        return cls._service_client

    @classmethod
    def anon(cls) -> Client:
        if cls._anon_client is None:
            config = get_active_config()
            if not config.supabase_url or not config.supabase_anon_key:
                raise SupabaseNotConfigured("Supabase anon credentials missing")
            cls._anon_client = create_client(config.supabase_url, config.supabase_anon_key)
        return cls._anon_client

    @classmethod
    def session_client(cls) -> Client:
        """A fresh anon client for a password sign-in; never shared across users."""
        config = get_active_config()
        if not config.supabase_url or not config.supabase_anon_key:
            raise SupabaseNotConfigured("Supabase anon credentials missing")
        return create_client(config.supabase_url, config.supabase_anon_key)

    @classmethod
    def for_user(cls, access_token: str) -> Client:
        """Build a client whose requests carry the user's access token."""
        config = get_active_config()
        if not config.supabase_url or not config.supabase_anon_key:
            raise SupabaseNotConfigured("Supabase anon credentials missing")
        options = ClientOptions(headers={"Authorization": f"Bearer {access_token}"})
        return create_client(config.supabase_url, config.supabase_anon_key, options=options)

    @classmethod
    def reset(cls) -> None:
        cls._service_client = None
        cls._anon_client = None


def get_db() -> Client:
    """
    Return the Supabase client appropriate for the current context.

    Inside a request the client is scoped to the caller's session and cached
    on ``flask.g``; anonymous requests get the anon client. Outside a request
    (scripts, CLI) the service-role client is returned.
    """
    if not has_request_context():
        return SupabaseClients.service()

    client = getattr(g, "supabase", None)
    if client is None:
        token = getattr(g, "jwt_token", None)
        client = SupabaseClients.for_user(token) if token else SupabaseClients.anon()
        g.supabase = client
    return client


def get_service_db() -> Client:
    return SupabaseClients.service()
