"""
Database access layer for the farm finance backend.

All database operations MUST:
- Run through a client carrying the caller's JWT (Row Level Security)
- Scope every query by user_id = auth.uid()
- Never use a service role key for user-initiated requests
"""

from .client import get_supabase_client

__all__ = ["get_supabase_client"]
