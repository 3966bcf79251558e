"""Session Service.

Owns the login state of the client and notifies subscribers of changes.

One SessionService is created at startup and handed to every consumer.
Subscribers receive the current state when they subscribe and every later
change synchronously, in registration order.
"""

import logging
from typing import Callable, List

from domain.backend import ResourceBackend
from domain.errors import UpstreamError
from domain.resource_models import Permission
from domain.session_models import LoginResult, LogoutResult, SessionState

logger = logging.getLogger(__name__)

SessionListener = Callable[[SessionState], None]


class SessionService:
    """Login/logout against the resource API with observable session state."""

    def __init__(self, backend: ResourceBackend, identity_kind: str = "email"):
        """Initialize the session service.

        Args:
            backend: Resource API used for authentication
            identity_kind: How users identify themselves ("email", "username" or "iri")
        """
        self._backend = backend
        self._identity_kind = identity_kind
        self._state = SessionState()
        self._listeners: List[SessionListener] = []

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def logged_in(self) -> bool:
        return self._state.logged_in

    @property
    def user_email(self) -> str:
        return self._state.user_email

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """
        Register a listener for session changes.

        The listener is called right away with the current state.

        Returns:
            A function that removes the listener again
        """
        self._listeners.append(listener)
        listener(self._state)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self, state: SessionState) -> None:
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception as e:
                logger.exception(f"Session listener {listener!r} failed: {e}")

    async def login(self, email: str, password: str) -> LoginResult:
        """
        Log in with email and password.

        Failures reported by the resource API (rejected credentials, network
        errors) are returned as a failed LoginResult; the session is untouched
        and nothing is published.
        """
        try:
            token = await self._backend.login(self._identity_kind, email, password)
        except UpstreamError as e:
            logger.info(f"Login failed for {email}: {e}")
            return LoginResult.failed(e.payload)

        logger.info(f"Logged in as {email}")
        self._publish(SessionState(logged_in=True, user_email=email))
        return LoginResult(success=True, token=token, user=email)

    async def logout(self) -> LogoutResult:
        """Log out; on failure the session is left as it is."""
        try:
            message = await self._backend.logout()
        except UpstreamError as e:
            logger.info(f"Logout failed: {e}")
            return LogoutResult(success=False, error=e.payload)

        logger.info(f"Logged out {self._state.user_email}")
        self._publish(SessionState())
        return LogoutResult(success=True, message=message)

    def can_edit(self, permission: str) -> bool:
        """Check if the current user may edit an item with the given permission code."""
        return self._state.logged_in and Permission.grants_edit(permission)
