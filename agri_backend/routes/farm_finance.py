"""
Farm finance record API endpoints.

One finance record per user, keyed by the user_id in the verified token:
- GET    /farm-finance  fetch the record (or exists=false)
- PUT    /farm-finance  create or fully replace the record
- DELETE /farm-finance  remove the record (idempotent)

OPTIONS preflights are answered by the app-level middleware in main.py.
"""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, HTTPException, status
from fastapi.concurrency import run_in_threadpool
from pydantic import ValidationError

from agri_backend.auth.dependencies import AuthenticatedUser, get_authenticated_user
from agri_backend.db.client import get_supabase_client
from agri_backend.schemas.farm_finance import (
    FarmFinanceDeleteResponse,
    FarmFinanceFetchResponse,
    FarmFinanceRecord,
    FarmFinanceSaveResponse,
    FarmFinanceUpsertRequest,
)
from agri_backend.services import (
    FarmFinanceStoreError,
    delete_farm_finance,
    get_farm_finance,
    upsert_farm_finance,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/farm-finance", tags=["farm-finance"])


def _invalid_request(details: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={"error": "invalid_request", "details": details}
    )


def _parse_upsert_body(body: Any) -> FarmFinanceUpsertRequest:
    """
    Validate a PUT body.

    expense_categories must be present and a JSON array; anything else in
    the body that does not fit FarmFinanceUpsertRequest is also a 400.
    """
    if not isinstance(body, dict):
        raise _invalid_request("Request body must be a JSON object")

    if not isinstance(body.get("expense_categories"), list):
        raise _invalid_request("Invalid expense_categories format")

    try:
        return FarmFinanceUpsertRequest.model_validate(body)
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first.get("loc", ()))
        raise _invalid_request(f"Invalid {location}: {first.get('msg')}")


@router.get(
    "",
    response_model=FarmFinanceFetchResponse,
    status_code=status.HTTP_200_OK,
    summary="Get farm finance data",
    description="""
    Retrieve the authenticated user's farm finance record.

    A user who has never saved gets `data: null` and `exists: false`;
    that is a normal 200 response, not an error.
    """
)
async def get_finance_data(
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)]
) -> FarmFinanceFetchResponse:
    """
    Get the authenticated user's finance record.

    Auth
    - Handled by get_authenticated_user dependency

    Call Service
    - get_farm_finance() under RLS

    Map Output -> ResponseModel
    - FarmFinanceFetchResponse with exists flag
    """
    logger.info(f"Fetching finance data for user {auth_user.user_id}")

    supabase_client = await run_in_threadpool(get_supabase_client, auth_user.access_token)

    try:
        record = await get_farm_finance(
            supabase_client=supabase_client,
            user_id=auth_user.user_id
        )

        if record is None:
            return FarmFinanceFetchResponse(data=None, exists=False)

        return FarmFinanceFetchResponse(
            data=FarmFinanceRecord.model_validate(record),
            exists=True
        )

    except Exception as e:
        logger.error(f"Failed to fetch finance data for user {auth_user.user_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "fetch_error",
                "details": "Failed to fetch finance data"
            }
        )


@router.put(
    "",
    response_model=FarmFinanceSaveResponse,
    status_code=status.HTTP_200_OK,
    summary="Create or replace farm finance data",
    description="""
    Save the authenticated user's farm finance record.

    The body replaces the whole record. `expense_categories` is required and
    must be an array. Missing `other_expenses`, `total_expense`,
    `yield_unit` and `price_unit` default to `[]`, `0`, `"kg"` and
    `"per kg"`. Derived figures are stored exactly as sent.

    Security:
    - The owner is always the token's user; any user_id in the body is ignored
    """
)
async def save_finance_data(
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
    body: Annotated[Any, Body()] = None,
) -> FarmFinanceSaveResponse:
    """
    Create or replace the user's finance record.

    Auth
    - Handled by get_authenticated_user dependency

    Parse/Validate Request
    - expense_categories must be an array, else 400 before any store access

    Call Service
    - upsert_farm_finance() applies defaults and writes on the user_id key

    Map Output -> ResponseModel
    - Persisted record plus created/updated message
    """
    request = _parse_upsert_body(body)

    logger.info(f"Saving finance data for user {auth_user.user_id}")

    supabase_client = await run_in_threadpool(get_supabase_client, auth_user.access_token)

    try:
        saved, created = await upsert_farm_finance(
            supabase_client=supabase_client,
            user_id=auth_user.user_id,
            payload=request.model_dump(by_alias=True)
        )

        return FarmFinanceSaveResponse(
            data=FarmFinanceRecord.model_validate(saved),
            message="Finance data created" if created else "Finance data updated"
        )

    except FarmFinanceStoreError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "save_error",
                "details": f"Failed to save finance data: {e.message}"
            }
        )
    except Exception as e:
        logger.error(f"Failed to save finance data for user {auth_user.user_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "save_error",
                "details": "Failed to save finance data"
            }
        )


@router.delete(
    "",
    response_model=FarmFinanceDeleteResponse,
    status_code=status.HTTP_200_OK,
    summary="Delete farm finance data",
    description="""
    Delete the authenticated user's farm finance record.

    Succeeds even when there is nothing to delete. There is no soft delete;
    the row is removed.
    """
)
async def delete_finance_data(
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)]
) -> FarmFinanceDeleteResponse:
    """Delete the user's finance record."""
    supabase_client = await run_in_threadpool(get_supabase_client, auth_user.access_token)

    try:
        await delete_farm_finance(
            supabase_client=supabase_client,
            user_id=auth_user.user_id
        )
    except Exception as e:
        logger.error(f"Failed to delete finance data for user {auth_user.user_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "delete_error",
                "details": "Failed to delete finance data"
            }
        )

    logger.info(f"Finance data deleted for user {auth_user.user_id}")

    return FarmFinanceDeleteResponse(message="Finance data deleted")
