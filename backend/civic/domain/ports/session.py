from __future__ import annotations

from typing import Protocol

from ...access.session import SessionContext


class SessionContextStore(Protocol):
    async def load(self, session_id: str) -> SessionContext | None:
        ...

    async def save(self, session_id: str, context: SessionContext) -> None:
        ...

    async def delete(self, session_id: str) -> None:
        ...
