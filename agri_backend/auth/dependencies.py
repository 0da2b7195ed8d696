"""
FastAPI dependency functions for authentication.

These functions verify the Supabase Auth bearer token and extract the
authenticated user_id (the owner key for every farm finance record).

Uses Supabase's JWT Signing Keys system with ECC (P-256) public key verification.
"""

import logging
from dataclasses import dataclass
from typing import Annotated, Tuple

from fastapi import Header, HTTPException, status
from fastapi.concurrency import run_in_threadpool
from jwt import PyJWKClient, decode
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError, PyJWKClientError

from agri_backend.config import settings

logger = logging.getLogger(__name__)

# JWKS client for fetching and caching Supabase's public keys
_jwks_client: PyJWKClient | None = None


@dataclass
class AuthenticatedUser:
    """
    Represents an authenticated user with their token.

    Attributes:
        user_id: The user's UUID from the JWT token's 'sub' claim
        access_token: The full JWT access token (for creating authenticated Supabase clients)
    """
    user_id: str
    access_token: str


def get_jwks_client() -> PyJWKClient:
    """
    Get or create the JWKS client instance.

    Returns:
        PyJWKClient: Configured JWKS client for Supabase

    Raises:
        ValueError: If SUPABASE_URL is not configured
    """
    global _jwks_client

    if _jwks_client is None:
        jwks_url = settings.SUPABASE_JWKS_URL
        if not jwks_url:
            raise ValueError(
                "SUPABASE_URL is not configured. "
                "Cannot construct JWKS URL for JWT verification."
            )

        logger.info(f"Initializing JWKS client with URL: {jwks_url}")
        _jwks_client = PyJWKClient(
            jwks_url,
            cache_keys=True,
            max_cached_keys=16,
        )

    return _jwks_client


def _unauthorized(error: str, details: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"error": error, "details": details}
    )


def extract_bearer_token(authorization: str | None) -> str:
    """
    Pull the token out of an "Authorization: Bearer <token>" header value.

    Raises:
        HTTPException: 401 if the header is missing or not a bearer credential
    """
    if not authorization:
        logger.warning("Missing Authorization header")
        raise _unauthorized("unauthorized", "Missing Authorization header")

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        logger.warning("Invalid Authorization header format")
        raise _unauthorized(
            "unauthorized",
            "Invalid Authorization header format (expected 'Bearer <token>')"
        )

    return parts[1]


def _verify_bearer(authorization: str | None) -> Tuple[str, str]:
    """Verify the bearer credential and return (user_id, token)."""
    token = extract_bearer_token(authorization)

    try:
        jwks_client = get_jwks_client()

        # Resolve the signing key from the token's 'kid' header (cached)
        signing_key = jwks_client.get_signing_key_from_jwt(token)

        payload = decode(
            token,
            signing_key.key,
            algorithms=["ES256"],
            audience="authenticated",
            issuer=settings.SUPABASE_JWT_ISSUER,
            options={
                "verify_signature": True,
                "verify_exp": True,
                "verify_aud": True,
                "verify_iss": True,
            }
        )

    except ExpiredSignatureError:
        logger.warning("Token has expired")
        raise _unauthorized("token_expired", "Authentication token has expired")

    except PyJWKClientError as e:
        logger.error(f"JWKS client error: {str(e)}")
        raise _unauthorized("jwks_error", "Unable to verify token signature")

    except InvalidTokenError as e:
        logger.warning(f"Invalid token: {str(e)}")
        raise _unauthorized("invalid_token", "Invalid authentication token")

    except Exception as e:
        # JWKS misconfiguration, network failures, ...
        logger.error(f"Unexpected error during token verification: {str(e)}")
        raise _unauthorized("unauthorized", "Token verification failed")

    # The 'sub' claim is auth.uid() in RLS policies
    user_id = payload.get("sub")

    if not user_id:
        logger.error("Token payload missing 'sub' claim")
        raise _unauthorized("unauthorized", "Invalid token: missing user ID")

    logger.info(f"Token verified successfully for user_id={user_id}")
    return str(user_id), token


async def get_authenticated_user(
    authorization: Annotated[str | None, Header()] = None
) -> AuthenticatedUser:
    """
    Verify token and return authenticated user with token.

    Security:
        - This is the ONLY source of truth for user_id
        - Any user_id sent in request body is ignored

    The token is returned too so routes can build a per-request Supabase
    client that runs under RLS.

    Raises:
        HTTPException: 401 if token is missing, invalid, or expired

    Usage:
        @router.get("/farm-finance")
        async def get_finance(
            auth_user: AuthenticatedUser = Depends(get_authenticated_user)
        ):
            supabase_client = get_supabase_client(auth_user.access_token)
    """
    # Key lookup may hit the JWKS endpoint; keep it off the event loop
    user_id, token = await run_in_threadpool(_verify_bearer, authorization)
    return AuthenticatedUser(user_id=user_id, access_token=token)
