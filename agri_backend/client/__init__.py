"""
Client-side helpers for the farm finance API.

FarmFinanceClient keeps the UI-facing request state (data, loading, saving,
error, last_saved) for one signed-in user and re-fetches whenever the
AuthSession signs in.
"""

from .farm_finance import (
    FarmFinanceClient,
    FarmFinanceRequestError,
    FarmFinanceState,
    Notification,
)
from .session import AuthEvent, AuthSession

__all__ = [
    "AuthEvent",
    "AuthSession",
    "FarmFinanceClient",
    "FarmFinanceRequestError",
    "FarmFinanceState",
    "Notification",
]
