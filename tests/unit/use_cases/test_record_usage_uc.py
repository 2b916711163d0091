"""Tests for RecordUsageUseCase and the warning/critical/reset cycle."""

from datetime import date

import pytest
from pydantic import ValidationError as PydanticValidationError

from labtrack.application.dto.requests import MaintenanceResetRequest, RecordUsageRequest
from labtrack.application.use_cases import (
    GetUsageInfoUseCase,
    RecordUsageUseCase,
    RegisterMaintenanceResetUseCase,
)
from labtrack.core.entities.machine import PartStatus
from labtrack.core.entities.notification import NotificationSeverity, NotificationType
from labtrack.core.exceptions import (
    MachineNotFoundError,
    MachinePartNotFoundError,
    UnitMismatchError,
    ValidationError,
)


@pytest.fixture
def use_case(stores):
    return RecordUsageUseCase(stores=stores)


def _usage(machine, item, amount, unit="hours", **kwargs) -> RecordUsageRequest:
    return RecordUsageRequest(
        machine_id=machine.id,
        inventory_item_id=item.id,
        amount=amount,
        unit=unit,
        **kwargs,
    )


class TestRecordUsageUseCase:
    async def test_records_log_and_counter(
        self, use_case, stores, machine, wear_item, installed_part, technician
    ):
        result = await use_case.execute(_usage(machine, wear_item, 12.5), actor=technician)

        assert result.part.current_usage == 12.5
        assert result.update.status == PartStatus.NORMAL
        assert result.notification is None
        assert result.log.responsible == "Ana Torres"
        assert result.log.installation_id == installed_part.installation_id
        assert result.log.machine_name == "HPLC-01"

        stored = await stores.machines.get_part(installed_part.id)
        assert stored.current_usage == 12.5
        logs = await stores.usage_logs.list_logs(machine_id=machine.id)
        assert [log.id for log in logs] == [result.log.id]

    async def test_explicit_responsible_wins(
        self, use_case, machine, wear_item, installed_part, technician
    ):
        result = await use_case.execute(
            _usage(machine, wear_item, 1, responsible="Night shift"), actor=technician
        )
        assert result.log.responsible == "Night shift"

    async def test_responsible_required(self, use_case, machine, wear_item, installed_part):
        with pytest.raises(ValidationError):
            await use_case.execute(_usage(machine, wear_item, 1))

    async def test_warning_critical_reset_cycle(
        self, use_case, stores, machine, wear_item, installed_part, technician
    ):
        """80 -> warning (one alert), +25 -> critical (one more), reset -> clean slate."""
        first = await use_case.execute(_usage(machine, wear_item, 80), actor=technician)
        assert first.update.status == PartStatus.WARNING
        assert first.notification is not None
        assert first.notification.severity == NotificationSeverity.MEDIUM

        second = await use_case.execute(_usage(machine, wear_item, 25), actor=technician)
        assert second.update.status == PartStatus.CRITICAL
        assert second.update.usage_percentage == pytest.approx(105.0)
        assert second.notification.severity == NotificationSeverity.HIGH

        third = await use_case.execute(_usage(machine, wear_item, 5), actor=technician)
        assert third.notification is None

        usage_alerts = [
            n
            for n in await stores.notifications.list_notifications()
            if n.type == NotificationType.USAGE_ALERT
        ]
        assert len(usage_alerts) == 2

        await RegisterMaintenanceResetUseCase(stores=stores).execute(
            MaintenanceResetRequest(machine_id=machine.id, inventory_item_id=wear_item.id),
            actor=technician,
        )
        [info] = await GetUsageInfoUseCase(stores=stores).execute()
        assert info.accumulated_usage == 0
        assert info.status == PartStatus.NORMAL
        assert info.alert is False
        assert info.requires_maintenance is False

        again = await use_case.execute(_usage(machine, wear_item, 80), actor=technician)
        assert again.notification is not None

    async def test_unit_mismatch_changes_nothing(
        self, use_case, stores, machine, wear_item, installed_part, technician
    ):
        with pytest.raises(UnitMismatchError):
            await use_case.execute(_usage(machine, wear_item, 10, unit="cycles"), actor=technician)

        stored = await stores.machines.get_part(installed_part.id)
        assert stored.current_usage == 0
        assert await stores.usage_logs.list_logs() == []

    @pytest.mark.parametrize("amount", [0, -1, float("inf")])
    async def test_non_positive_amount(
        self, use_case, stores, machine, wear_item, installed_part, technician, amount
    ):
        request = RecordUsageRequest.model_construct(
            machine_id=machine.id,
            inventory_item_id=wear_item.id,
            amount=amount,
            unit="hours",
            usage_date=None,
            responsible=None,
            notes=None,
        )

        with pytest.raises(ValidationError):
            await use_case.execute(request, actor=technician)

        stored = await stores.machines.get_part(installed_part.id)
        assert stored.current_usage == 0
        assert await stores.usage_logs.list_logs() == []

    @pytest.mark.parametrize("amount", [float("inf"), float("-inf"), float("nan")])
    async def test_request_rejects_non_finite_amount(self, machine, wear_item, amount):
        with pytest.raises(PydanticValidationError):
            _usage(machine, wear_item, amount)

    async def test_unknown_machine(self, use_case, wear_item, technician):
        with pytest.raises(MachineNotFoundError):
            await use_case.execute(
                RecordUsageRequest(
                    machine_id=99, inventory_item_id=wear_item.id, amount=1, unit="hours"
                ),
                actor=technician,
            )

    async def test_part_not_installed(self, use_case, machine, wear_item, technician):
        with pytest.raises(MachinePartNotFoundError):
            await use_case.execute(_usage(machine, wear_item, 1), actor=technician)

    async def test_usage_date_is_kept(
        self, use_case, machine, wear_item, installed_part, technician
    ):
        result = await use_case.execute(
            _usage(machine, wear_item, 2, usage_date=date(2024, 3, 1)), actor=technician
        )
        assert result.log.usage_date == date(2024, 3, 1)

    async def test_to_response(self, use_case, machine, wear_item, installed_part, technician):
        result = await use_case.execute(_usage(machine, wear_item, 90), actor=technician)
        response = use_case.to_response(result)
        assert response.status == PartStatus.WARNING
        assert response.previous_status == PartStatus.NORMAL
        assert response.alert is not None
        assert response.part.id == installed_part.id
