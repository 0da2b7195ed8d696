"""
Farm finance record service.

Handles fetching, saving and deleting the per-user farm finance record in
the farm_finances table. There is at most one record per user; the table
carries a unique constraint on user_id and saves go through an upsert on
that key.

The supabase client is synchronous, so each query executes on the
threadpool instead of blocking the event loop.
"""

import logging
from typing import Any, Dict, Optional, Tuple, cast

from fastapi.concurrency import run_in_threadpool
from postgrest.exceptions import APIError
from supabase import Client

from agri_backend.config import settings

logger = logging.getLogger(__name__)

# Columns the API writes. id/created_at/updated_at belong to the store.
PASSTHROUGH_FIELDS = (
    "expense_categories",
    "predicted_yield",
    "predicted_price",
    "crop_type",
    "expected_revenue",
    "net_profit_loss",
    "profit_loss_percentage",
    "break_even_price",
)


class FarmFinanceStoreError(Exception):
    """Raised when the record store rejects or fails an operation."""

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code


def _store_error(action: str, error: APIError) -> FarmFinanceStoreError:
    message = error.message or str(error)
    logger.error(f"Store error while {action} finance data: code={error.code} message={message}")
    return FarmFinanceStoreError(message, code=error.code)


def build_finance_row(user_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    Build the full row written on save.

    Saves replace the whole record, so every writable column is present.
    Missing or empty other_expenses/total_expense/yield_unit/price_unit take
    their defaults; every other field is copied as given, null included.

    Args:
        user_id: Owner key from the verified token (never from the body)
        payload: Validated request body (wire field names)

    Returns:
        Row dict ready for insert/upsert
    """
    row: Dict[str, Any] = {"user_id": user_id}

    for field in PASSTHROUGH_FIELDS:
        row[field] = payload.get(field)

    row["other_expenses"] = payload.get("other_expenses") or []
    row["total_expense"] = payload.get("total_expense") or 0
    row["yield_unit"] = payload.get("yield_unit") or settings.DEFAULT_YIELD_UNIT
    row["price_unit"] = payload.get("price_unit") or settings.DEFAULT_PRICE_UNIT

    return row


async def get_farm_finance(
    supabase_client: Client,
    user_id: str
) -> Optional[Dict[str, Any]]:
    """
    Fetch the user's farm finance record.

    Returns:
        The record dict, or None if the user has not saved anything yet

    Raises:
        FarmFinanceStoreError: If the store query fails
    """
    logger.debug(f"Fetching finance data for user {user_id}")

    try:
        result = await run_in_threadpool(
            supabase_client.table(settings.FARM_FINANCE_TABLE)
            .select("*")
            .eq("user_id", user_id)
            .limit(1)
            .execute
        )
    except APIError as e:
        raise _store_error("fetching", e)

    if not result.data:
        logger.info(f"No finance data yet for user {user_id}")
        return None

    return cast(Dict[str, Any], result.data[0])


async def farm_finance_exists(supabase_client: Client, user_id: str) -> bool:
    """Check whether the user already has a record (selects only the id)."""
    try:
        result = await run_in_threadpool(
            supabase_client.table(settings.FARM_FINANCE_TABLE)
            .select("id")
            .eq("user_id", user_id)
            .limit(1)
            .execute
        )
    except APIError as e:
        raise _store_error("checking", e)

    return bool(result.data)


async def upsert_farm_finance(
    supabase_client: Client,
    user_id: str,
    payload: Dict[str, Any]
) -> Tuple[Dict[str, Any], bool]:
    """
    Create or fully replace the user's farm finance record.

    The existence check only decides whether the caller hears "created" or
    "updated". The write itself is a single upsert on user_id, so two
    concurrent saves still leave exactly one row.

    Args:
        supabase_client: Authenticated Supabase client
        user_id: The authenticated user's ID
        payload: Validated request body (wire field names)

    Returns:
        (persisted record, created) where created is True for a first save

    Raises:
        FarmFinanceStoreError: If the store rejects the write
    """
    existed = await farm_finance_exists(supabase_client, user_id)
    row = build_finance_row(user_id, payload)

    try:
        result = await run_in_threadpool(
            supabase_client.table(settings.FARM_FINANCE_TABLE)
            .upsert(row, on_conflict="user_id")
            .execute
        )
    except APIError as e:
        raise _store_error("saving", e)

    if not result.data:
        raise FarmFinanceStoreError("Failed to save finance data: no data returned")

    saved: Dict[str, Any] = cast(Dict[str, Any], result.data[0])
    logger.info(f"Finance data {'updated' if existed else 'created'} for user {user_id}")

    return saved, not existed


async def delete_farm_finance(supabase_client: Client, user_id: str) -> None:
    """
    Delete the user's farm finance record.

    Deleting when no record exists is not an error.

    Raises:
        FarmFinanceStoreError: If the store query fails
    """
    logger.info(f"Deleting finance data for user {user_id}")

    try:
        await run_in_threadpool(
            supabase_client.table(settings.FARM_FINANCE_TABLE)
            .delete()
            .eq("user_id", user_id)
            .execute
        )
    except APIError as e:
        raise _store_error("deleting", e)
