"""
Database Adapter Protocol.

Defines the store interface the onboarding core depends on.

The adapter exposes a thin wrapper matching the Supabase/PostgREST
query builder pattern: table() returns a query builder supporting
.select(), .insert(), .update(), .delete(), .eq(), .in_(), .order(),
.limit() and .execute(). A supabase.Client satisfies it as-is; tests
pass an in-memory implementation.
"""

from typing import Any, Protocol, runtime_checkable


# Collections touched by onboarding
USERS_TABLE = "users"
INTERESTS_TABLE = "interests"
CLUBS_TABLE = "clubs"
USER_INTERESTS_TABLE = "user_interests"
USER_CLUBS_TABLE = "user_clubs"
CAMPUS_BUILDINGS_TABLE = "campus_buildings"


@runtime_checkable
class DatabaseAdapter(Protocol):
    """
    Abstract database access for onboarding.

    The table() method returns a query builder; the concrete type
    depends on the backend (e.g., SyncRequestBuilder for Supabase).
    Executed queries return an object whose .data is a list of row dicts.
    """

    def table(self, name: str) -> Any:
        """Return a query builder for the given table."""
        ...
