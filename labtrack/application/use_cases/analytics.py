"""
Maintenance analytics use case.

Aggregates maintenance spend and part wear for the dashboard and for
exporters: cost per machine, monthly cost per location, most-consumed parts,
a comparison of maintenance types, the active usage alerts and the parts
that are due for service.
"""

from dataclasses import dataclass, field
from datetime import date

from labtrack.application.dto.responses import MaintenanceAnalyticsResponse
from labtrack.application.use_cases.base import StoreUseCase
from labtrack.application.use_cases.get_usage_info import GetUsageInfoUseCase
from labtrack.application.use_cases.history import HISTORY_LIMIT
from labtrack.config import get_logger
from labtrack.core.entities.machine import Machine
from labtrack.core.entities.maintenance import Maintenance, MaintenanceType
from labtrack.core.entities.usage import UsageInfo

logger = get_logger(__name__)

# Machines without a location are grouped under this name
UNASSIGNED_LOCATION = "Unassigned"


def month_key(day: date) -> str:
    return f"{day.year:04d}-{day.month:02d}"


def recent_months(today: date, count: int) -> list[str]:
    """The ``count`` calendar months ending with ``today``'s, oldest first."""
    months = []
    year, month = today.year, today.month
    for _ in range(count):
        months.append(f"{year:04d}-{month:02d}")
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return months[::-1]


def maintenance_day(maintenance: Maintenance) -> date:
    """Start date, or the creation day for jobs that were never scheduled."""
    return maintenance.start_date or maintenance.created_at.date()


@dataclass
class MachineCost:
    machine_id: int
    machine_name: str
    location: str
    maintenance_count: int = 0
    labor_cost: float = 0.0
    parts_cost: float = 0.0

    @property
    def total_cost(self) -> float:
        return self.labor_cost + self.parts_cost


@dataclass
class MonthlyCost:
    month: str
    cost: float = 0.0


@dataclass
class LocationMonthlyCost:
    location: str
    months: list[MonthlyCost]


@dataclass
class PartConsumption:
    inventory_item_id: int
    name: str
    total_quantity: int = 0
    total_cost: float = 0.0
    uses: int = 0


@dataclass
class TypeSummary:
    maintenance_type: MaintenanceType
    count: int = 0
    labor_cost: float = 0.0
    parts_cost: float = 0.0

    @property
    def total_cost(self) -> float:
        return self.labor_cost + self.parts_cost


@dataclass
class MonthlyTypeCounts:
    month: str
    counts: dict[MaintenanceType, int] = field(
        default_factory=lambda: {t: 0 for t in MaintenanceType}
    )


@dataclass
class LocationSpend:
    location: str
    machines: list[MachineCost] = field(default_factory=list)

    @property
    def total_cost(self) -> float:
        return sum(m.total_cost for m in self.machines)


@dataclass
class MaintenanceAnalytics:
    months: list[str]
    cost_by_machine: list[MachineCost]
    monthly_cost_by_location: list[LocationMonthlyCost]
    top_parts: list[PartConsumption]
    type_summary: list[TypeSummary]
    type_trend: list[MonthlyTypeCounts]
    active_alerts: list[UsageInfo]
    critical_parts: list[UsageInfo]
    cumulative_spend: list[LocationSpend]

    @property
    def total_cost(self) -> float:
        return sum(m.total_cost for m in self.cost_by_machine)


class GetMaintenanceAnalyticsUseCase(StoreUseCase):
    """
    Read-only aggregates over maintenance jobs and installed parts.

    Costs are parts plus labor. Monthly series cover the last ``months``
    calendar months, keyed ``YYYY-MM``; jobs with no start date count in the
    month they were created.
    """

    async def execute(self, months: int = 6, today: date | None = None) -> MaintenanceAnalytics:
        stores = self.stores
        machines = await stores.machines.list_machines(limit=HISTORY_LIMIT)
        maintenances = await stores.maintenance.list_maintenance(limit=HISTORY_LIMIT)
        usage = await GetUsageInfoUseCase(stores).execute()

        window = recent_months(today or date.today(), months)
        cost_by_machine = self._cost_by_machine(machines, maintenances)

        analytics = MaintenanceAnalytics(
            months=window,
            cost_by_machine=cost_by_machine,
            monthly_cost_by_location=self._monthly_cost_by_location(
                machines, maintenances, window
            ),
            top_parts=self._top_parts(maintenances),
            type_summary=self._type_summary(maintenances),
            type_trend=self._type_trend(maintenances, window),
            active_alerts=sorted(
                (r for r in usage if r.alert), key=lambda r: r.usage_percentage, reverse=True
            ),
            critical_parts=sorted(
                (r for r in usage if r.requires_maintenance),
                key=lambda r: r.usage_percentage,
                reverse=True,
            ),
            cumulative_spend=self._cumulative_spend(cost_by_machine),
        )
        logger.info(
            "maintenance_analytics_computed",
            machines=len(machines),
            maintenances=len(maintenances),
            total_cost=analytics.total_cost,
            active_alerts=len(analytics.active_alerts),
        )
        return analytics

    @staticmethod
    def _cost_by_machine(
        machines: list[Machine], maintenances: list[Maintenance]
    ) -> list[MachineCost]:
        costs = {
            m.id: MachineCost(
                machine_id=m.id,
                machine_name=m.name,
                location=m.location or UNASSIGNED_LOCATION,
            )
            for m in machines
        }
        for job in maintenances:
            entry = costs.get(job.machine_id)
            if entry is None:
                continue
            entry.maintenance_count += 1
            entry.labor_cost += job.labor_cost
            entry.parts_cost += job.parts_cost
        return sorted(costs.values(), key=lambda c: c.total_cost, reverse=True)

    @staticmethod
    def _monthly_cost_by_location(
        machines: list[Machine], maintenances: list[Maintenance], window: list[str]
    ) -> list[LocationMonthlyCost]:
        location_of = {m.id: m.location or UNASSIGNED_LOCATION for m in machines}
        series: dict[str, dict[str, float]] = {
            loc: dict.fromkeys(window, 0.0) for loc in sorted(set(location_of.values()))
        }
        for job in maintenances:
            location = location_of.get(job.machine_id)
            key = month_key(maintenance_day(job))
            if location is None or key not in series[location]:
                continue
            series[location][key] += job.total_cost
        return [
            LocationMonthlyCost(
                location=loc,
                months=[MonthlyCost(month=k, cost=v) for k, v in by_month.items()],
            )
            for loc, by_month in series.items()
        ]

    @staticmethod
    def _top_parts(maintenances: list[Maintenance]) -> list[PartConsumption]:
        parts: dict[int, PartConsumption] = {}
        for job in maintenances:
            for part in job.parts:
                entry = parts.setdefault(
                    part.inventory_item_id,
                    PartConsumption(
                        inventory_item_id=part.inventory_item_id,
                        name=part.inventory_item_name,
                    ),
                )
                entry.total_quantity += part.quantity_used
                entry.total_cost += part.total_cost
                entry.uses += 1
        return sorted(parts.values(), key=lambda p: (-p.total_quantity, p.name))

    @staticmethod
    def _type_summary(maintenances: list[Maintenance]) -> list[TypeSummary]:
        summary = {t: TypeSummary(maintenance_type=t) for t in MaintenanceType}
        for job in maintenances:
            entry = summary[job.maintenance_type]
            entry.count += 1
            entry.labor_cost += job.labor_cost
            entry.parts_cost += job.parts_cost
        return list(summary.values())

    @staticmethod
    def _type_trend(
        maintenances: list[Maintenance], window: list[str]
    ) -> list[MonthlyTypeCounts]:
        trend = {key: MonthlyTypeCounts(month=key) for key in window}
        for job in maintenances:
            entry = trend.get(month_key(maintenance_day(job)))
            if entry is not None:
                entry.counts[job.maintenance_type] += 1
        return list(trend.values())

    @staticmethod
    def _cumulative_spend(cost_by_machine: list[MachineCost]) -> list[LocationSpend]:
        by_location: dict[str, LocationSpend] = {}
        for cost in cost_by_machine:
            spend = by_location.setdefault(cost.location, LocationSpend(location=cost.location))
            spend.machines.append(cost)
        return sorted(by_location.values(), key=lambda s: s.total_cost, reverse=True)

    def to_response(self, analytics: MaintenanceAnalytics) -> MaintenanceAnalyticsResponse:
        return MaintenanceAnalyticsResponse.model_validate(analytics, from_attributes=True)
