"""
Tests for the access contract vocabularies and principal validation.

Roles, visibility modes and priorities are closed sets. Anything outside them
must raise instead of falling back to a default.
"""
import pytest

from civic.access import contract
from civic.access.contract import Priority, Role, VisibilityMode
from civic.access.principal import Principal


class TestRoleOrdering:
    """Roles compare by rank, not by their string value."""

    def test_roles_are_totally_ordered(self):
        assert Role.USER < Role.ADMIN < Role.SUPERADMIN
        assert Role.SUPERADMIN > Role.ADMIN > Role.USER

    def test_rank_differs_from_lexical_order(self):
        # "superadmin" < "user" as strings
        assert Role.SUPERADMIN.value < Role.USER.value
        assert Role.SUPERADMIN.rank > Role.USER.rank

    def test_role_sets(self):
        assert contract.ALL_ROLES == {"user", "admin", "superadmin"}
        assert contract.SCOPED_ROLES == {Role.ADMIN, Role.SUPERADMIN}


class TestParseRole:
    def test_parse_role_normalizes(self):
        assert contract.parse_role(" Admin ") == Role.ADMIN

    def test_parse_role_passes_enum_through(self):
        assert contract.parse_role(Role.SUPERADMIN) is Role.SUPERADMIN

    def test_parse_role_rejects_unknown(self):
        with pytest.raises(ValueError, match="Invalid role"):
            contract.parse_role("super_admin")

    def test_parse_role_rejects_empty(self):
        with pytest.raises(ValueError, match="Invalid role"):
            contract.parse_role("")


class TestVocabularies:
    def test_visibility_modes_defined(self):
        assert contract.ALLOWED_VISIBILITY_MODES == {"local", "global", "custom"}
        assert {mode.value for mode in VisibilityMode} == contract.ALLOWED_VISIBILITY_MODES

    def test_priority_order_puts_urgent_first(self):
        ordered = sorted(Priority, key=contract.PRIORITY_ORDER.__getitem__)
        assert ordered == [Priority.URGENT, Priority.PINNED, Priority.NORMAL]

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [(None, ""), ("  Dembeni ", "dembeni"), ("SADA", "sada"), ("", "")],
    )
    def test_normalize_commune_id(self, raw, expected):
        assert contract.normalize_commune_id(raw) == expected


class TestPrincipal:
    def test_admin_requires_home_commune(self):
        with pytest.raises(ValueError, match="home commune"):
            Principal(id="admin-1", role=Role.ADMIN)

    def test_blank_id_is_rejected(self):
        with pytest.raises(ValueError, match="must not be empty"):
            Principal(id="   ", role=Role.SUPERADMIN)

    def test_role_and_commune_are_normalized(self):
        principal = Principal(id=" admin-1 ", role="ADMIN", home_commune_id=" Dembeni ")

        assert principal.id == "admin-1"
        assert principal.role is Role.ADMIN
        assert principal.home_commune_id == "dembeni"
        assert principal.is_admin
        assert not principal.is_superadmin

    def test_superadmin_home_commune_is_optional(self):
        principal = Principal(id="root", role=Role.SUPERADMIN, home_commune_id="  ")

        assert principal.home_commune_id is None

    def test_equality_ignores_email_and_impersonation(self):
        original = Principal(id="root", role=Role.SUPERADMIN)
        admin = Principal(id="admin-1", role=Role.ADMIN, home_commune_id="sada", email="a@example.com")

        borrowed = admin.as_impersonated_by(original)

        assert borrowed == Principal(id="admin-1", role=Role.ADMIN, home_commune_id="sada")
        assert borrowed.is_impersonated
        assert not borrowed.without_impersonation().is_impersonated

    def test_dict_form_round_trips_nested_original(self):
        original = Principal(id="root", role=Role.SUPERADMIN, email="root@example.com")
        borrowed = Principal(id="admin-1", role=Role.ADMIN, home_commune_id="sada").as_impersonated_by(
            original
        )

        restored = Principal.from_dict(borrowed.to_dict())

        assert restored == borrowed
        assert restored.impersonating == original
        assert restored.impersonating.email == "root@example.com"
