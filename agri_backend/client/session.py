"""
Auth session holder for client code.

Stores the current Supabase access token and tells subscribers when the
auth state changes, so dependent state (like the farm finance sheet) can
reload on sign-in instead of polling.
"""

import logging
from enum import Enum
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)


class AuthEvent(str, Enum):
    """Auth state change events, named like supabase-js onAuthStateChange."""
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"


AuthListener = Callable[[AuthEvent, Optional[str]], None]


class AuthSession:
    """Current access token plus auth-state-changed subscriptions."""

    def __init__(self, access_token: Optional[str] = None):
        self._access_token = access_token or None
        self._listeners: List[AuthListener] = []

    @property
    def access_token(self) -> Optional[str]:
        return self._access_token

    @property
    def is_authenticated(self) -> bool:
        return bool(self._access_token)

    def on_auth_state_change(self, listener: AuthListener) -> Callable[[], None]:
        """
        Register a listener called with (event, access_token).

        Returns:
            A function that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def set_session(self, access_token: str) -> None:
        """Store a new token; SIGNED_IN if previously signed out, else TOKEN_REFRESHED."""
        if not access_token:
            raise ValueError("access_token must not be empty")

        was_authenticated = self.is_authenticated
        self._access_token = access_token
        self._emit(AuthEvent.TOKEN_REFRESHED if was_authenticated else AuthEvent.SIGNED_IN)

    def clear(self) -> None:
        """Sign out. No event if already signed out."""
        if not self.is_authenticated:
            return
        self._access_token = None
        self._emit(AuthEvent.SIGNED_OUT)

    def _emit(self, event: AuthEvent) -> None:
        logger.info(f"Auth state changed: {event.value}")
        for listener in list(self._listeners):
            listener(event, self._access_token)
