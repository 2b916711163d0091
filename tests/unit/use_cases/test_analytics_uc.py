"""Tests for GetMaintenanceAnalyticsUseCase."""

from datetime import date

import pytest

from labtrack.application.dto.requests import (
    CreateMaintenanceRequest,
    MaintenancePartRequest,
    RecordUsageRequest,
)
from labtrack.application.use_cases import (
    CreateMaintenanceUseCase,
    GetMaintenanceAnalyticsUseCase,
    RecordUsageUseCase,
)
from labtrack.application.use_cases.analytics import recent_months
from labtrack.core.entities.machine import Machine
from labtrack.core.entities.maintenance import MaintenanceType

TODAY = date(2024, 3, 20)


@pytest.fixture
def use_case(stores):
    return GetMaintenanceAnalyticsUseCase(stores=stores)


@pytest.fixture
async def gc(stores) -> Machine:
    return await stores.machines.create_machine(
        Machine(name="GC-02", model="Clarus 590", location="Lab 3")
    )


@pytest.fixture
async def activity(stores, machine, gc, wear_item, installed_part, technician):
    """
    Three jobs and one usage event.

    HPLC-01 (no location): preventive in March (20 labor + 1 filter) and a
    calibration outside the window (10 labor). GC-02 in Lab 3: corrective in
    February (50 labor + 2 filters). The installed filter sits at 80%.
    """
    create = CreateMaintenanceUseCase(stores=stores)
    jobs = [
        (machine, MaintenanceType.PREVENTIVE, date(2024, 3, 5), 20, 1),
        (gc, MaintenanceType.CORRECTIVE, date(2024, 2, 10), 50, 2),
        (machine, MaintenanceType.CALIBRATION, date(2023, 6, 1), 10, 0),
    ]
    for target, kind, start, labor, filters in jobs:
        parts = (
            [MaintenancePartRequest(inventory_item_id=wear_item.id, quantity_used=filters)]
            if filters
            else []
        )
        await create.execute(
            CreateMaintenanceRequest(
                machine_id=target.id,
                maintenance_type=kind,
                start_date=start,
                labor_cost=labor,
                parts=parts,
            ),
            actor=technician,
        )

    await RecordUsageUseCase(stores=stores).execute(
        RecordUsageRequest(
            machine_id=machine.id, inventory_item_id=wear_item.id, amount=80, unit="hours"
        ),
        actor=technician,
    )


class TestRecentMonths:
    def test_spans_year_boundary(self):
        assert recent_months(date(2024, 2, 15), 3) == ["2023-12", "2024-01", "2024-02"]

    def test_single_month(self):
        assert recent_months(TODAY, 1) == ["2024-03"]


class TestMaintenanceAnalytics:
    async def test_cost_by_machine(self, use_case, machine, gc, activity):
        analytics = await use_case.execute(months=3, today=TODAY)

        assert [c.machine_id for c in analytics.cost_by_machine] == [gc.id, machine.id]
        gc_cost, hplc_cost = analytics.cost_by_machine
        assert gc_cost.total_cost == 130.0
        assert gc_cost.location == "Lab 3"
        assert hplc_cost.maintenance_count == 2
        assert hplc_cost.labor_cost == 30.0
        assert hplc_cost.parts_cost == 40.0
        assert hplc_cost.location == "Unassigned"
        assert analytics.total_cost == 200.0

    async def test_monthly_cost_by_location(self, use_case, activity):
        analytics = await use_case.execute(months=3, today=TODAY)

        assert analytics.months == ["2024-01", "2024-02", "2024-03"]
        series = {
            entry.location: [m.cost for m in entry.months]
            for entry in analytics.monthly_cost_by_location
        }
        assert series == {"Lab 3": [0.0, 130.0, 0.0], "Unassigned": [0.0, 0.0, 60.0]}

    async def test_top_parts(self, use_case, wear_item, activity):
        analytics = await use_case.execute(months=3, today=TODAY)

        [part] = analytics.top_parts
        assert part.inventory_item_id == wear_item.id
        assert part.total_quantity == 3
        assert part.total_cost == 120.0
        assert part.uses == 2

    async def test_type_comparison(self, use_case, activity):
        analytics = await use_case.execute(months=3, today=TODAY)

        summary = {s.maintenance_type: (s.count, s.total_cost) for s in analytics.type_summary}
        assert summary == {
            MaintenanceType.PREVENTIVE: (1, 60.0),
            MaintenanceType.CORRECTIVE: (1, 130.0),
            MaintenanceType.CALIBRATION: (1, 10.0),
        }

        trend = {t.month: t.counts for t in analytics.type_trend}
        assert trend["2024-01"] == {t: 0 for t in MaintenanceType}
        assert trend["2024-02"][MaintenanceType.CORRECTIVE] == 1
        assert trend["2024-03"][MaintenanceType.PREVENTIVE] == 1
        assert trend["2024-03"][MaintenanceType.CALIBRATION] == 0

    async def test_alerts_and_critical_parts(self, use_case, installed_part, activity):
        analytics = await use_case.execute(months=3, today=TODAY)

        assert [r.part_id for r in analytics.active_alerts] == [installed_part.id]
        assert analytics.critical_parts == []

    async def test_cumulative_spend_by_location(self, use_case, gc, activity):
        analytics = await use_case.execute(months=3, today=TODAY)

        assert [(s.location, s.total_cost) for s in analytics.cumulative_spend] == [
            ("Lab 3", 130.0),
            ("Unassigned", 70.0),
        ]
        assert [m.machine_id for m in analytics.cumulative_spend[0].machines] == [gc.id]

    async def test_empty_stores(self, use_case):
        analytics = await use_case.execute(months=2, today=TODAY)

        assert analytics.cost_by_machine == []
        assert analytics.top_parts == []
        assert analytics.active_alerts == []
        assert analytics.total_cost == 0
        assert [s.count for s in analytics.type_summary] == [0, 0, 0]
        assert [t.month for t in analytics.type_trend] == ["2024-02", "2024-03"]

    async def test_to_response(self, use_case, activity):
        analytics = await use_case.execute(months=3, today=TODAY)

        response = use_case.to_response(analytics)

        assert response.total_cost == 200.0
        assert response.cumulative_spend[1].total_cost == 70.0
        data = response.model_dump(mode="json")
        assert data["type_trend"][1]["counts"]["corrective"] == 1
        assert data["active_alerts"][0]["status"] == "warning"
