from pydantic import BaseModel, ConfigDict, Field

from ..access.principal import Principal
from ..access.session import SessionContext


class PrincipalRead(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    role: str
    commune_id: str | None = Field(default=None, alias="communeId")
    email: str | None = None

    @classmethod
    def from_principal(cls, principal: Principal) -> "PrincipalRead":
        return cls(
            id=principal.id,
            role=principal.role.value,
            commune_id=principal.home_commune_id,
            email=principal.email,
        )


class SessionRead(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    principal: PrincipalRead
    original_principal: PrincipalRead = Field(alias="originalPrincipal")
    impersonating: bool
    selected_commune_id: str | None = Field(default=None, alias="selectedCommuneId")

    @classmethod
    def from_context(cls, context: SessionContext) -> "SessionRead":
        return cls(
            principal=PrincipalRead.from_principal(context.principal),
            original_principal=PrincipalRead.from_principal(context.original_principal),
            impersonating=context.is_impersonating,
            selected_commune_id=context.selected_commune_id,
        )


class SelectCommuneRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    commune_id: str = Field(..., min_length=1, max_length=100, alias="communeId")


class ImpersonateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    principal_id: str = Field(..., min_length=1, max_length=64, alias="principalId")
