"""
Supabase client factory with RLS enforcement.

Clients are created per request with the caller's access token, so the
farm_finances RLS policies (auth.uid() = user_id) apply to every query.
"""

import logging

from supabase import Client, create_client

from agri_backend.config import settings

logger = logging.getLogger(__name__)


def get_supabase_client(access_token: str) -> Client:
    """
    Create an authenticated Supabase client for a specific user.

    Args:
        access_token: The user's JWT access token, already verified by
                      agri_backend.auth.dependencies.get_authenticated_user.

    Returns:
        An authenticated Supabase client that enforces RLS.

    Example:
        >>> client = get_supabase_client(auth_user.access_token)
        >>> client.table("farm_finances").select("*").execute()
    """
    client: Client = create_client(
        supabase_url=settings.SUPABASE_URL,
        supabase_key=settings.SUPABASE_PUBLISHABLE_KEY
    )

    # The token's 'sub' claim becomes auth.uid() inside RLS policies
    client.auth.set_session(access_token, access_token)

    logger.debug("Created authenticated Supabase client with user token (RLS enforced)")

    return client
