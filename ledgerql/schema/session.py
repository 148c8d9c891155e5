"""Authenticated session model used for tenant scoping."""
from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any

from pydantic import BaseModel, ConfigDict


class Session(BaseModel):
    """The signed-in user as seen by the HTTP backend.

    Attributes:
        user_id: Tenant key injected into every HTTP request.
        email: User e-mail, if known.
        full_name: Display name, if known.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    user_id: str
    email: str | None = None
    full_name: str | None = None

    def user_payload(self) -> dict[str, Any]:
        """Return the ``user`` object in the shape auth callers expect."""
        return {
            "id": self.user_id,
            "email": self.email,
            "user_metadata": {"full_name": self.full_name},
        }


#: Async callable returning the current session, or ``None`` when signed out.
SessionProvider = Callable[[], Awaitable["Session | None"]]


def static_session(session: Session | None) -> SessionProvider:
    """Wrap a fixed session (or ``None``) as a :data:`SessionProvider`."""

    async def _provider() -> Session | None:
        return session

    return _provider
