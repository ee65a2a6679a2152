import json
import logging

from ..access.session import SessionContext
from ..domain.ports.session import SessionContextStore as SessionContextStorePort
from ..infrastructure.redis import RedisClient

logger = logging.getLogger(__name__)

SESSION_KEY_PREFIX = "session:context:"


def session_key(session_id: str) -> str:
    return f"{SESSION_KEY_PREFIX}{session_id}"


class RedisSessionContextStore(SessionContextStorePort):
    """One JSON document per session; a transition is a single SET."""

    def __init__(self, client: RedisClient, ttl_seconds: int) -> None:
        self._client = client
        self._ttl_seconds = ttl_seconds

    async def load(self, session_id: str) -> SessionContext | None:
        raw = await self._client.get_value(session_key(session_id))
        if raw is None:
            return None
        try:
            return SessionContext.from_dict(json.loads(raw))
        except (ValueError, KeyError, TypeError) as exc:
            # A corrupt document must not grant anything: drop it
            logger.warning("session_context_discarded session_id=%s error=%s", session_id, exc)
            await self._client.delete_value(session_key(session_id))
            return None

    async def save(self, session_id: str, context: SessionContext) -> None:
        await self._client.set_value(
            session_key(session_id),
            json.dumps(context.to_dict()),
            ttl_seconds=self._ttl_seconds,
        )

    async def delete(self, session_id: str) -> None:
        await self._client.delete_value(session_key(session_id))
