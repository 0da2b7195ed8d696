"""
Farm finance client state container.

Wraps GET/PUT/DELETE /farm-finance for one signed-in user and tracks what
a UI needs to render: the last known record, whether a fetch or a save is
in flight, the last error and when data was last saved.

Every transition replaces the FarmFinanceState instance; subscribers get
the new state after each change.

Notifications:
- save and clear report success and failure (user-initiated actions)
- fetch failures are recorded in state only
"""

import logging
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

import requests

from .session import AuthEvent, AuthSession

logger = logging.getLogger(__name__)

FINANCE_PATH = "/farm-finance"


@dataclass(frozen=True)
class Notification:
    """A transient user-facing message (toast)."""
    title: str
    description: str
    variant: str = "default"


@dataclass(frozen=True)
class FarmFinanceState:
    """UI-facing request state for the farm finance sheet."""
    data: Optional[Dict[str, Any]] = None
    loading: bool = False
    saving: bool = False
    error: Optional[str] = None
    last_saved: Optional[datetime] = None


class FarmFinanceRequestError(Exception):
    """The API answered with an error status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


Notifier = Callable[[Notification], None]
StateListener = Callable[[FarmFinanceState], None]


def _error_message(body: Any, fallback: str) -> str:
    """Pick the most specific message out of an API error body."""
    if not isinstance(body, dict):
        return fallback

    detail = body.get("detail")
    if isinstance(detail, dict):
        return detail.get("details") or detail.get("error") or fallback
    if isinstance(detail, str) and detail:
        return detail

    return body.get("error") or fallback


class FarmFinanceClient:
    """
    Request state for the signed-in user's farm finance record.

    Args:
        base_url: API root, e.g. "https://api.example.com"
        auth: Session that supplies the bearer token; the client re-fetches
              whenever it signs in
        notify: Receives user-facing notifications (defaults to logging them)
        session: requests.Session or any object with the same request() API
        timeout: Optional per-request timeout in seconds
        auto_fetch: Fetch immediately if auth is already signed in
    """

    def __init__(
        self,
        base_url: str,
        auth: AuthSession,
        notify: Optional[Notifier] = None,
        session: Optional[Any] = None,
        timeout: Optional[float] = None,
        auto_fetch: bool = True,
    ):
        self.base_url = base_url.rstrip("/")
        self.auth = auth
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout
        self._notify = notify or self._log_notification
        self._state = FarmFinanceState()
        self._listeners: List[StateListener] = []
        self._unsubscribe_auth = auth.on_auth_state_change(self._on_auth_state_change)

        if auto_fetch and auth.is_authenticated:
            self.fetch_data()

    # --- State ---

    @property
    def state(self) -> FarmFinanceState:
        return self._state

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Call listener with every new state. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_state(self, **changes: Any) -> None:
        self._state = replace(self._state, **changes)
        for listener in list(self._listeners):
            listener(self._state)

    @staticmethod
    def _log_notification(notification: Notification) -> None:
        logger.info(f"[{notification.variant}] {notification.title}: {notification.description}")

    def _on_auth_state_change(self, event: AuthEvent, access_token: Optional[str]) -> None:
        if event == AuthEvent.SIGNED_IN:
            self.fetch_data()

    # --- HTTP ---

    def _request(self, method: str, fallback: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Call the finance endpoint with the current bearer token.

        Raises:
            FarmFinanceRequestError: On an error status
            requests.RequestException: On transport failure
        """
        response = self.session.request(
            method,
            f"{self.base_url}{FINANCE_PATH}",
            headers={
                "Authorization": f"Bearer {self.auth.access_token}",
                "Content-Type": "application/json",
            },
            json=payload,
            timeout=self.timeout,
        )

        try:
            body = response.json()
        except ValueError:
            body = None

        if response.status_code >= 400:
            raise FarmFinanceRequestError(_error_message(body, fallback), response.status_code)

        return body if isinstance(body, dict) else {}

    def _guard_signed_in(self, action: str) -> bool:
        if self.auth.is_authenticated:
            return True
        self._notify(Notification(
            title="Not authenticated",
            description=f"Please log in to {action} your data",
            variant="destructive",
        ))
        return False

    # --- Operations ---

    def fetch_data(self) -> Optional[Dict[str, Any]]:
        """
        Load the user's record.

        Does nothing without a token. On failure the previous data is kept,
        the error is recorded and no notification is shown.

        Returns:
            The record, or None if there is none yet or the fetch failed
        """
        if not self.auth.is_authenticated:
            return None

        self._set_state(loading=True, error=None)

        try:
            result = self._request("GET", "Failed to fetch data")
        except (FarmFinanceRequestError, requests.RequestException) as e:
            logger.error(f"Error fetching finance data: {e}")
            self._set_state(loading=False, error=str(e) or "Failed to fetch data")
            return None

        data = result.get("data")
        self._set_state(data=data, loading=False)
        return data

    def save_data(self, record: Dict[str, Any]) -> bool:
        """
        Create or replace the user's record.

        Returns:
            True on success, False otherwise (the user is notified either way)
        """
        if not self._guard_signed_in("save"):
            return False

        self._set_state(saving=True, error=None)

        try:
            result = self._request("PUT", "Failed to save data", payload=record)
        except (FarmFinanceRequestError, requests.RequestException) as e:
            message = str(e) or "Failed to save data"
            logger.error(f"Error saving finance data: {message}")
            self._set_state(saving=False, error=message)
            self._notify(Notification(title="Save failed", description=message, variant="destructive"))
            return False

        self._set_state(
            data=result.get("data"),
            saving=False,
            last_saved=datetime.now(timezone.utc),
        )
        self._notify(Notification(
            title="Data saved",
            description="Your expense data has been saved successfully",
        ))
        return True

    def clear_data(self) -> bool:
        """
        Delete the user's record.

        Returns:
            True on success, False otherwise (the user is notified either way)
        """
        if not self._guard_signed_in("clear"):
            return False

        self._set_state(saving=True, error=None)

        try:
            self._request("DELETE", "Failed to clear data")
        except (FarmFinanceRequestError, requests.RequestException) as e:
            message = str(e) or "Failed to clear data"
            logger.error(f"Error clearing finance data: {message}")
            self._set_state(saving=False, error=message)
            self._notify(Notification(title="Clear failed", description=message, variant="destructive"))
            return False

        self._set_state(data=None, saving=False)
        self._notify(Notification(title="Data cleared", description="Your expense data has been reset"))
        return True

    def close(self) -> None:
        """Stop listening to auth changes and close the HTTP session."""
        self._unsubscribe_auth()
        self.session.close()
