import logging

from sqlalchemy.ext.asyncio import AsyncSession

from ..access.principal import Principal
from ..domain.ports.principal import PrincipalDirectory as PrincipalDirectoryPort
from ..models.account import Account

logger = logging.getLogger(__name__)


async def get_account(session: AsyncSession, account_id: str) -> Account | None:
    return await session.get(Account, account_id)


def account_to_principal(account: Account) -> Principal:
    return Principal(
        id=account.id,
        role=account.role,
        home_commune_id=account.commune_id,
        email=account.email,
    )


class AccountDirectory(PrincipalDirectoryPort):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, principal_id: str) -> Principal | None:
        account = await get_account(self._session, principal_id)
        if account is None or not account.is_active:
            return None
        try:
            return account_to_principal(account)
        except ValueError as exc:
            # An admin row without commune is unusable as a principal
            logger.error("invalid_account account_id=%s error=%s", principal_id, exc)
            return None
