"""Role-based capability checks."""

from labtrack.core.entities.user import Action, Actor, UserRole
from labtrack.core.interfaces.permissions import IPermissionChecker

ROLE_PERMISSIONS: dict[str, frozenset[Action]] = {
    UserRole.SUPERVISOR.value: frozenset(
        {
            Action.VIEW_BASIC,
            Action.VIEW_MACHINES,
            Action.VIEW_REPORTS,
            Action.EDIT_REPORTS,
            Action.VIEW_ANALYTICS,
            Action.MANAGE_NOTIFICATIONS,
        }
    ),
    UserRole.TECHNICIAN.value: frozenset(
        {
            Action.VIEW_BASIC,
            Action.VIEW_MACHINES,
            Action.EDIT_MACHINES,
            Action.RECORD_USAGE,
            Action.PERFORM_MAINTENANCE,
            Action.VIEW_REPORTS,
            Action.EDIT_REPORTS,
            Action.MANAGE_NOTIFICATIONS,
        }
    ),
    UserRole.OPERATOR.value: frozenset(
        {
            Action.VIEW_BASIC,
            Action.VIEW_MACHINES,
            Action.RECORD_USAGE,
            Action.VIEW_REPORTS,
            Action.CREATE_REPORTS,
        }
    ),
    UserRole.GUEST.value: frozenset({Action.VIEW_BASIC}),
}


class RolePermissionChecker(IPermissionChecker):
    """Static role -> actions table; admins may do everything."""

    def __init__(self, role_permissions: dict[str, frozenset[Action]] | None = None) -> None:
        self._role_permissions = role_permissions or ROLE_PERMISSIONS

    def has_permission(self, actor: Actor | None, action: Action | str) -> bool:
        if actor is None:
            return False
        if actor.role == UserRole.ADMIN.value:
            return True
        try:
            action = Action(action)
        except ValueError:
            return False
        return action in self._role_permissions.get(actor.role, frozenset())
