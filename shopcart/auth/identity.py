"""Identity providers: who is signed in, pushed as a stream of changes."""
from dataclasses import dataclass
from typing import Any, Callable, Optional, Protocol

from shopcart.logging import get_logger, sanitize_id_for_logging

logger = get_logger(__name__)


@dataclass(frozen=True)
class IdentityUser:
    """Authenticated user as seen by the cart."""
    id: str
    email: Optional[str] = None


IdentityHandler = Callable[[Optional[IdentityUser]], None]


class IdentityProvider(Protocol):
    """Source of sign-in / sign-out events.

    The handler receives the new user, or None after sign-out. The first
    event may arrive after subscribing; there is no "current user" accessor.
    """

    def on_identity_change(self, handler: IdentityHandler) -> Callable[[], None]:
        """Register handler and return a callable that unsubscribes it."""
        ...


# Supabase auth events that change who is signed in
_FORWARDED_EVENTS = frozenset({"INITIAL_SESSION", "SIGNED_IN", "SIGNED_OUT", "USER_DELETED"})


def _event_name(event: Any) -> str:
    # AuthChangeEvent is a Literal in current gotrue, an Enum in older builds
    return getattr(event, "value", event)


class SupabaseIdentityProvider:
    """Adapts Supabase auth state changes to IdentityProvider.

    Token refreshes and profile updates are dropped, and repeated events
    for the same user are collapsed, so handlers only see real transitions.
    """

    def __init__(self, auth_client) -> None:
        self._auth = auth_client

    def on_identity_change(self, handler: IdentityHandler) -> Callable[[], None]:
        state = {"emitted": False, "user_id": None}

        def _callback(event, session) -> None:
            name = _event_name(event)
            if name not in _FORWARDED_EVENTS:
                return

            user = None
            if name not in ("SIGNED_OUT", "USER_DELETED") and session is not None and session.user:
                user = IdentityUser(id=str(session.user.id), email=getattr(session.user, "email", None))

            user_id = user.id if user else None
            if state["emitted"] and state["user_id"] == user_id:
                return
            state["emitted"] = True
            state["user_id"] = user_id

            logger.debug(f"Auth event {name} for user {sanitize_id_for_logging(user_id)}")
            handler(user)

        subscription = self._auth.on_auth_state_change(_callback)
        return subscription.unsubscribe
