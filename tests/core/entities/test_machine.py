"""Tests for machine and machine part entities."""

from datetime import date

import pytest
from pydantic import ValidationError

from labtrack.core.entities.machine import (
    Machine,
    MachinePart,
    MachineStatus,
    PartStatus,
    classify_usage,
    usage_percentage,
)


def _part(current_usage: float = 0.0, max_usage: float = 100.0) -> MachinePart:
    return MachinePart(
        machine_id=1,
        inventory_item_id=1,
        name="Filter",
        usage_type="hours",
        current_usage=current_usage,
        max_usage=max_usage,
    )


class TestClassifyUsage:
    """Wear bands as a pure function of usage and max usage."""

    @pytest.mark.parametrize(
        ("current", "expected"),
        [
            (0, PartStatus.NORMAL),
            (74.99, PartStatus.NORMAL),
            (75, PartStatus.WARNING),
            (99.99, PartStatus.WARNING),
            (100, PartStatus.CRITICAL),
            (250, PartStatus.CRITICAL),
        ],
    )
    def test_bands(self, current, expected):
        assert classify_usage(current, 100) == expected

    def test_percentage_is_not_capped(self):
        assert usage_percentage(150, 100) == 150.0

    def test_status_rank_order(self):
        assert PartStatus.NORMAL.rank < PartStatus.WARNING.rank < PartStatus.CRITICAL.rank


class TestMachinePart:
    """Tests for MachinePart entity."""

    def test_defaults(self):
        part = _part()
        assert part.id is None
        assert part.current_usage == 0.0
        assert part.status == PartStatus.NORMAL
        assert part.alerted_status == PartStatus.NORMAL
        assert part.installation_date == date.today()
        assert len(part.installation_id) == 32

    def test_status_is_derived(self):
        part = _part(current_usage=80)
        assert part.status == PartStatus.WARNING
        part.current_usage = 100
        assert part.status == PartStatus.CRITICAL

    def test_status_has_no_setter(self):
        part = _part()
        with pytest.raises(AttributeError):
            part.status = PartStatus.CRITICAL  # type: ignore[misc]

    def test_usage_percentage(self):
        assert _part(current_usage=105).usage_percentage == pytest.approx(105.0)

    @pytest.mark.parametrize("max_usage", [0, float("inf")])
    def test_max_usage_must_be_positive_and_finite(self, max_usage):
        with pytest.raises(ValidationError):
            _part(max_usage=max_usage)

    def test_current_usage_must_be_finite(self):
        with pytest.raises(ValidationError):
            _part(current_usage=float("inf"))

    def test_current_usage_cannot_be_negative(self):
        with pytest.raises(ValidationError):
            _part(current_usage=-1)

    def test_start_new_epoch_keeps_installation(self):
        part = _part(current_usage=90)
        part.alerted_status = PartStatus.WARNING
        installation_id = part.installation_id

        part.start_new_epoch()

        assert part.current_usage == 0.0
        assert part.alerted_status == PartStatus.NORMAL
        assert part.installation_id == installation_id

    def test_start_new_epoch_with_new_installation(self):
        part = _part(current_usage=120)
        part.installation_date = date(2024, 1, 1)
        installation_id = part.installation_id

        part.start_new_epoch(new_installation=True)

        assert part.status == PartStatus.NORMAL
        assert part.installation_id != installation_id
        assert part.installation_date == date.today()


class TestMachine:
    def test_defaults(self):
        machine = Machine(name="Centrifuge", model="5810R")
        assert machine.status == MachineStatus.OPERATIONAL
        assert machine.version == 0
        assert machine.last_maintenance is None
