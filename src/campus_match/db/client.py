"""
Campus Match - Supabase Client.

Low-level database access. All store queries go through one of these clients.
"""

from supabase import Client, create_client

from campus_match.config import settings

# Singleton client instances
_client: Client | None = None
_service_client: Client | None = None


def get_client() -> Client:
    """
    Get the anon-key Supabase client.

    Uses singleton pattern to reuse connection.
    """
    global _client

    if _client is None:
        _client = create_client(
            settings.supabase_url,
            settings.supabase_anon_key,
        )

    return _client


def get_service_client() -> Client:
    """
    Get the service-role Supabase client.

    Used for token validation and for writes made on behalf of an
    already-authenticated user. Falls back to the anon key when no
    service key is configured (local development).
    """
    global _service_client

    if _service_client is None:
        _service_client = create_client(
            settings.supabase_url,
            settings.supabase_service_role_key or settings.supabase_anon_key,
        )

    return _service_client
