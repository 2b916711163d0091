"""Abstract interface for incident report storage."""

from abc import ABC, abstractmethod

from labtrack.core.entities.report import IncidentReport, ReportStatus


class IIncidentReportStore(ABC):
    """Interface for incident report persistence."""

    @abstractmethod
    async def create(self, report: IncidentReport) -> IncidentReport:
        pass

    @abstractmethod
    async def get(self, report_id: int) -> IncidentReport | None:
        pass

    @abstractmethod
    async def update(self, report: IncidentReport) -> IncidentReport:
        pass

    @abstractmethod
    async def delete(self, report_id: int) -> bool:
        pass

    @abstractmethod
    async def list_reports(
        self,
        machine_id: int | None = None,
        status: ReportStatus | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[IncidentReport]:
        """List reports, newest report date first."""
        pass
