"""Capability-check collaborator."""

from abc import ABC, abstractmethod

from labtrack.core.entities.user import Action, Actor


class IPermissionChecker(ABC):
    """Decides whether an actor may perform an action."""

    @abstractmethod
    def has_permission(self, actor: Actor | None, action: Action | str) -> bool:
        pass
