"""Shared wiring for use cases backed by the configured stores."""

from labtrack.core.entities.user import Actor
from labtrack.core.exceptions import ValidationError
from labtrack.core.services import AlertEmitter, InventoryService
from labtrack.infrastructure.storage import StoreBundle


class StoreUseCase:
    """
    Base for use cases that read and write through a StoreBundle.

    The bundle is injected in tests and resolved lazily from settings otherwise.
    """

    def __init__(self, stores: StoreBundle | None = None):
        self._stores = stores

    @property
    def stores(self) -> StoreBundle:
        if self._stores is None:
            from labtrack.infrastructure.storage import get_stores

            self._stores = get_stores()
        return self._stores

    @property
    def inventory(self) -> InventoryService:
        return InventoryService(self.stores.inventory)

    @property
    def alerts(self) -> AlertEmitter:
        return AlertEmitter(self.stores.notifications)


def resolve_responsible(explicit: str | None, actor: Actor | None, field: str = "responsible") -> str:
    """Explicit name if given, else the caller's label."""
    if explicit and explicit.strip():
        return explicit.strip()
    if actor is not None:
        return actor.label
    raise ValidationError(field, "a responsible person is required")
