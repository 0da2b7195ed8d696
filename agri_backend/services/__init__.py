"""
Service layer for the farm finance backend.

Services wrap the Record Store (Supabase farm_finances table). Routes call
them with a per-request authenticated client, so RLS scopes every query.
"""

from .farm_finance_service import (
    FarmFinanceStoreError,
    build_finance_row,
    delete_farm_finance,
    farm_finance_exists,
    get_farm_finance,
    upsert_farm_finance,
)

__all__ = [
    "FarmFinanceStoreError",
    "build_finance_row",
    "get_farm_finance",
    "farm_finance_exists",
    "upsert_farm_finance",
    "delete_farm_finance",
]
