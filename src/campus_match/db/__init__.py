"""
Campus Match - Database access.

Supabase client plus the adapter protocol the onboarding core is written against.
"""

from campus_match.db.adapter import DatabaseAdapter
from campus_match.db.client import get_client, get_service_client

__all__ = [
    "DatabaseAdapter",
    "get_client",
    "get_service_client",
]
