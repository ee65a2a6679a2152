import pytest

from civic.access.errors import UnauthorizedError
from civic.access.scope import ALL_COMMUNES, EffectiveScope, resolve_scope
from tests.access_helpers import ADMIN_DEMBENI, SUPERADMIN, USER


def test_admin_is_pinned_to_home_commune():
    scope = resolve_scope(ADMIN_DEMBENI, "mamoudzou")

    assert scope.acting_commune_id == "dembeni"
    assert not scope.is_all


def test_admin_without_request_gets_home_commune():
    assert resolve_scope(ADMIN_DEMBENI).acting_commune_id == "dembeni"


def test_superadmin_request_is_normalized():
    scope = resolve_scope(SUPERADMIN, "  Mamoudzou ")

    assert scope.acting_commune_id == "mamoudzou"
    assert scope.as_header_value() == "mamoudzou"


@pytest.mark.parametrize("requested", [None, "", "   "])
def test_superadmin_without_request_sees_all_communes(requested):
    scope = resolve_scope(SUPERADMIN, requested)

    assert scope.acting_commune_id is ALL_COMMUNES
    assert scope.is_all
    assert scope.as_header_value() == ""


def test_user_is_not_scoped():
    with pytest.raises(UnauthorizedError) as exc_info:
        resolve_scope(USER, "dembeni")
    assert exc_info.value.reason == "role_not_scoped"


def test_missing_principal_is_unauthorized():
    with pytest.raises(UnauthorizedError) as exc_info:
        resolve_scope(None)
    assert exc_info.value.reason == "principal_missing"


def test_scope_requires_commune_or_sentinel():
    with pytest.raises(ValueError):
        EffectiveScope(acting_commune_id="  ")


def test_scope_membership():
    assert EffectiveScope(ALL_COMMUNES).includes("anything")
    assert EffectiveScope("dembeni").includes(" DEMBENI ")
    assert not EffectiveScope("dembeni").includes("mamoudzou")
    assert not EffectiveScope("dembeni").includes(None)


def test_all_communes_is_a_singleton():
    assert type(ALL_COMMUNES)() is ALL_COMMUNES
    assert repr(ALL_COMMUNES) == "ALL_COMMUNES"
