"""Tests for role-based permission checks."""

import pytest

from labtrack.core.entities.user import Action, Actor, UserRole
from labtrack.core.services import RolePermissionChecker


@pytest.fixture
def checker() -> RolePermissionChecker:
    return RolePermissionChecker()


def _actor(role: str) -> Actor:
    return Actor(user_id="u-1", role=role)


class TestRolePermissionChecker:
    def test_admin_can_do_everything(self, checker):
        admin = _actor(UserRole.ADMIN.value)
        assert all(checker.has_permission(admin, action) for action in Action)

    def test_technician(self, checker):
        tech = _actor(UserRole.TECHNICIAN.value)
        assert checker.has_permission(tech, Action.RECORD_USAGE)
        assert checker.has_permission(tech, Action.PERFORM_MAINTENANCE)
        assert not checker.has_permission(tech, Action.MANAGE_INVENTORY)

    def test_operator(self, checker):
        operator = _actor(UserRole.OPERATOR.value)
        assert checker.has_permission(operator, Action.RECORD_USAGE)
        assert checker.has_permission(operator, Action.CREATE_REPORTS)
        assert not checker.has_permission(operator, Action.PERFORM_MAINTENANCE)

    def test_guest_only_views_basics(self, checker):
        guest = _actor(UserRole.GUEST.value)
        assert checker.has_permission(guest, Action.VIEW_BASIC)
        assert not checker.has_permission(guest, Action.VIEW_MACHINES)

    def test_unknown_role_has_nothing(self, checker):
        stranger = _actor("janitor")
        assert not any(checker.has_permission(stranger, action) for action in Action)

    def test_string_actions(self, checker):
        tech = _actor(UserRole.TECHNICIAN.value)
        assert checker.has_permission(tech, "record_usage")
        assert not checker.has_permission(tech, "launch_rockets")

    def test_anonymous(self, checker):
        assert not checker.has_permission(None, Action.VIEW_BASIC)

    def test_custom_table(self):
        checker = RolePermissionChecker({"auditor": frozenset({Action.VIEW_REPORTS})})
        assert checker.has_permission(_actor("auditor"), Action.VIEW_REPORTS)
        assert not checker.has_permission(_actor(UserRole.TECHNICIAN.value), Action.VIEW_REPORTS)
