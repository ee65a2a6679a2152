from __future__ import annotations

from typing import Protocol

from ...access.principal import Principal


class PrincipalDirectory(Protocol):
    async def get(self, principal_id: str) -> Principal | None:
        ...
