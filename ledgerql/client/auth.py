"""Auth pass-through: exposes the session provider in the Supabase shape."""
from __future__ import annotations

from ledgerql.client.backends import guarded
from ledgerql.schema.result import QueryResult
from ledgerql.schema.session import SessionProvider


class AuthInterface:
    """``client.auth``: ``get_session()`` and ``get_user()``.

    Both resolve to an envelope whose ``data`` holds ``session`` / ``user``
    (``None`` when signed out).
    """

    def __init__(self, session_provider: SessionProvider) -> None:
        self._provider = session_provider

    async def get_session(self) -> QueryResult:
        async def _call() -> QueryResult:
            session = await self._provider()
            payload = {"user": session.user_payload()} if session is not None else None
            return QueryResult(data={"session": payload})

        return await guarded("get_session", "auth", _call)

    async def get_user(self) -> QueryResult:
        async def _call() -> QueryResult:
            session = await self._provider()
            return QueryResult(data={"user": session.user_payload() if session is not None else None})

        return await guarded("get_user", "auth", _call)
