import json
from unittest.mock import AsyncMock

import pytest

from civic.access.session import SessionContext
from civic.crud.session_context import RedisSessionContextStore, session_key
from civic.infrastructure.redis import RedisClient
from tests.access_helpers import ADMIN_DEMBENI, SUPERADMIN


def make_store(stored: str | None = None) -> tuple[RedisSessionContextStore, AsyncMock]:
    client = AsyncMock(spec=RedisClient)
    client.get_value.return_value = stored
    return RedisSessionContextStore(client, ttl_seconds=600), client


@pytest.mark.anyio
async def test_save_writes_one_document_with_ttl() -> None:
    store, client = make_store()
    context = SessionContext(principal=SUPERADMIN).select_commune("dembeni")

    await store.save("sid-1", context)

    client.set_value.assert_awaited_once()
    key, value = client.set_value.await_args.args
    assert key == "session:context:sid-1"
    assert client.set_value.await_args.kwargs == {"ttl_seconds": 600}
    assert json.loads(value)["selectedCommuneId"] == "dembeni"


@pytest.mark.anyio
async def test_load_restores_impersonation() -> None:
    context = SessionContext(principal=SUPERADMIN).impersonate(ADMIN_DEMBENI)
    store, client = make_store(json.dumps(context.to_dict()))

    loaded = await store.load("sid-1")

    client.get_value.assert_awaited_once_with(session_key("sid-1"))
    assert loaded == context
    assert loaded is not None and loaded.original_principal == SUPERADMIN


@pytest.mark.anyio
async def test_load_missing_session_returns_none() -> None:
    store, _client = make_store(None)

    assert await store.load("sid-unknown") is None


@pytest.mark.anyio
@pytest.mark.parametrize(
    "raw",
    [
        "{not json",
        json.dumps({"selectedCommuneId": "dembeni"}),
        json.dumps({"principal": {"id": "x", "role": "emperor"}}),
        json.dumps({"principal": {"id": "x", "role": "admin", "communeId": None}}),
    ],
)
async def test_corrupt_document_is_discarded(raw: str) -> None:
    store, client = make_store(raw)

    assert await store.load("sid-1") is None
    client.delete_value.assert_awaited_once_with("session:context:sid-1")


@pytest.mark.anyio
async def test_delete_removes_the_document() -> None:
    store, client = make_store()

    await store.delete("sid-1")

    client.delete_value.assert_awaited_once_with("session:context:sid-1")
