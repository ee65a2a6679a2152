"""
Tests for the tenant-selection and impersonation context.

Transitions return a new context; the previous one must stay untouched.
"""
import pytest

from civic.access.contract import Role
from civic.access.errors import ForbiddenError, InvalidImpersonationTransitionError
from civic.access.scope import ALL_COMMUNES
from civic.access.session import SessionContext
from tests.access_helpers import ADMIN_DEMBENI, ADMIN_MAMOUDZOU, OTHER_SUPERADMIN, SUPERADMIN, USER


class TestCommuneSelection:
    def test_fresh_superadmin_context_sees_all_communes(self):
        context = SessionContext(principal=SUPERADMIN)

        assert context.selected_commune_id is None
        assert context.scope().acting_commune_id is ALL_COMMUNES

    def test_selection_drives_the_scope(self):
        context = SessionContext(principal=SUPERADMIN).select_commune(" Dembeni ")

        assert context.selected_commune_id == "dembeni"
        assert context.scope().acting_commune_id == "dembeni"

    def test_request_commune_takes_precedence_over_selection(self):
        context = SessionContext(principal=SUPERADMIN).select_commune("dembeni")

        assert context.scope("mamoudzou").acting_commune_id == "mamoudzou"
        assert context.scope("  ").acting_commune_id == "dembeni"

    def test_clear_selection_returns_to_all_communes(self):
        selected = SessionContext(principal=SUPERADMIN).select_commune("dembeni")

        cleared = selected.clear_selection()

        assert cleared.selected_commune_id is None
        assert cleared.scope().is_all
        assert selected.selected_commune_id == "dembeni"

    @pytest.mark.parametrize("action", ["select", "clear"])
    def test_admin_cannot_select_a_commune(self, action):
        context = SessionContext(principal=ADMIN_DEMBENI)

        with pytest.raises(ForbiddenError) as exc_info:
            if action == "select":
                context.select_commune("mamoudzou")
            else:
                context.clear_selection()
        assert exc_info.value.reason.endswith("_requires_superadmin")

    def test_admin_selection_never_reaches_the_scope(self):
        context = SessionContext(principal=ADMIN_DEMBENI, selected_commune_id="mamoudzou")

        assert context.requested_commune_id is None
        assert context.scope().acting_commune_id == "dembeni"


class TestImpersonation:
    def test_impersonation_borrows_the_target_identity(self):
        original = SessionContext(principal=SUPERADMIN)

        context = original.impersonate(ADMIN_DEMBENI)

        assert context.is_impersonating
        assert context.effective_principal.id == "admin-dembeni"
        assert context.effective_principal.role == Role.ADMIN
        assert context.original_principal is SUPERADMIN
        assert not original.is_impersonating

    def test_impersonated_scope_ignores_requested_commune(self):
        context = (
            SessionContext(principal=SUPERADMIN)
            .select_commune("mamoudzou")
            .impersonate(ADMIN_DEMBENI)
        )

        assert context.scope().acting_commune_id == "dembeni"
        assert context.scope("mamoudzou").acting_commune_id == "dembeni"

    def test_nested_impersonation_is_rejected(self):
        context = SessionContext(principal=SUPERADMIN).impersonate(ADMIN_DEMBENI)

        with pytest.raises(InvalidImpersonationTransitionError) as exc_info:
            context.impersonate(ADMIN_MAMOUDZOU)
        assert exc_info.value.reason == "nested_impersonation"

    def test_impersonating_another_superadmin_is_still_one_level(self):
        context = SessionContext(principal=SUPERADMIN).impersonate(OTHER_SUPERADMIN)

        with pytest.raises(InvalidImpersonationTransitionError):
            context.impersonate(ADMIN_DEMBENI)

    def test_admin_cannot_impersonate(self):
        with pytest.raises(ForbiddenError) as exc_info:
            SessionContext(principal=ADMIN_DEMBENI).impersonate(ADMIN_MAMOUDZOU)
        assert exc_info.value.reason == "impersonate_requires_superadmin"

    def test_self_impersonation_is_rejected(self):
        with pytest.raises(InvalidImpersonationTransitionError) as exc_info:
            SessionContext(principal=SUPERADMIN).impersonate(SUPERADMIN)
        assert exc_info.value.reason == "self_impersonation"

    def test_plain_user_cannot_be_impersonated(self):
        with pytest.raises(ForbiddenError) as exc_info:
            SessionContext(principal=SUPERADMIN).impersonate(USER)
        assert exc_info.value.reason == "impersonation_target_not_staff"

    def test_revert_restores_the_superadmin_and_selection(self):
        selected = SessionContext(principal=SUPERADMIN).select_commune("sada")
        impersonating = selected.impersonate(ADMIN_DEMBENI)

        reverted = impersonating.revert()

        assert reverted == selected
        assert not reverted.is_impersonating
        assert reverted.scope().acting_commune_id == "sada"
        assert impersonating.is_impersonating

    def test_revert_without_impersonation_is_rejected(self):
        with pytest.raises(InvalidImpersonationTransitionError) as exc_info:
            SessionContext(principal=SUPERADMIN).revert()
        assert exc_info.value.reason == "no_active_impersonation"

    def test_selection_is_frozen_while_impersonating_an_admin(self):
        context = (
            SessionContext(principal=SUPERADMIN)
            .select_commune("sada")
            .impersonate(ADMIN_DEMBENI)
        )

        with pytest.raises(ForbiddenError):
            context.select_commune("mamoudzou")
        assert context.selected_commune_id == "sada"

    def test_ensure_can_impersonate_checks_before_lookup(self):
        SessionContext(principal=SUPERADMIN).ensure_can_impersonate("anyone")

        with pytest.raises(ForbiddenError):
            SessionContext(principal=ADMIN_DEMBENI).ensure_can_impersonate("anyone")


def test_context_serialization_keeps_impersonation():
    context = (
        SessionContext(principal=SUPERADMIN)
        .select_commune("sada")
        .impersonate(ADMIN_DEMBENI)
    )

    restored = SessionContext.from_dict(context.to_dict())

    assert restored == context
    assert restored.is_impersonating
    assert restored.original_principal == SUPERADMIN
    assert restored.original_principal.email == "root@example.com"
