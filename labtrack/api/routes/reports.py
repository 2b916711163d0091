"""
Incident report endpoints.
"""

from fastapi import APIRouter, Depends, status

from labtrack.api.dependencies import get_store_bundle, require_permission
from labtrack.application.dto.requests import (
    CreateIncidentReportRequest,
    UpdateIncidentReportRequest,
)
from labtrack.application.dto.responses import ErrorResponse, IncidentReportResponse
from labtrack.application.use_cases.base import resolve_responsible
from labtrack.config import get_logger
from labtrack.core.entities.report import IncidentReport, ReportStatus
from labtrack.core.entities.user import Action, Actor
from labtrack.core.exceptions import IncidentReportNotFoundError, MachineNotFoundError
from labtrack.infrastructure.storage import StoreBundle

logger = get_logger(__name__)

router = APIRouter(prefix="/api/reports", tags=["reports"])


@router.post(
    "",
    response_model=IncidentReportResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def create_report(
    request: CreateIncidentReportRequest,
    stores: StoreBundle = Depends(get_store_bundle),
    actor: Actor | None = Depends(require_permission(Action.CREATE_REPORTS)),
) -> IncidentReportResponse:
    """File an incident report; the caller is recorded as the reporter."""
    reported_by = resolve_responsible(None, actor, field="reported_by")

    machine = await stores.machines.get_machine(request.machine_id)
    if machine is None:
        raise MachineNotFoundError(request.machine_id)

    fields = request.model_dump(exclude_none=True)
    report = await stores.reports.create(
        IncidentReport(machine_name=machine.name, reported_by=reported_by, **fields)
    )
    logger.info(
        "incident_report_created",
        report_id=report.id,
        machine_id=machine.id,
        priority=report.priority.value,
    )
    return IncidentReportResponse.model_validate(report)


@router.get(
    "",
    response_model=list[IncidentReportResponse],
)
async def list_reports(
    machine_id: int | None = None,
    report_status: ReportStatus | None = None,
    limit: int = 100,
    offset: int = 0,
    stores: StoreBundle = Depends(get_store_bundle),
    actor: Actor | None = Depends(require_permission(Action.VIEW_REPORTS)),
) -> list[IncidentReportResponse]:
    """List incident reports, newest first."""
    reports = await stores.reports.list_reports(
        machine_id=machine_id,
        status=report_status,
        limit=limit,
        offset=offset,
    )
    return [IncidentReportResponse.model_validate(r) for r in reports]


@router.get(
    "/{report_id}",
    response_model=IncidentReportResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_report(
    report_id: int,
    stores: StoreBundle = Depends(get_store_bundle),
    actor: Actor | None = Depends(require_permission(Action.VIEW_REPORTS)),
) -> IncidentReportResponse:
    """Get an incident report by ID."""
    report = await stores.reports.get(report_id)
    if report is None:
        raise IncidentReportNotFoundError(report_id)
    return IncidentReportResponse.model_validate(report)


@router.put(
    "/{report_id}",
    response_model=IncidentReportResponse,
    responses={404: {"model": ErrorResponse}},
)
async def update_report(
    report_id: int,
    request: UpdateIncidentReportRequest,
    stores: StoreBundle = Depends(get_store_bundle),
    actor: Actor | None = Depends(require_permission(Action.EDIT_REPORTS)),
) -> IncidentReportResponse:
    """Update a report; completing it stamps the completion date."""
    existing = await stores.reports.get(report_id)
    if existing is None:
        raise IncidentReportNotFoundError(report_id)

    changes = request.model_dump(exclude_unset=True, exclude={"status"})
    for field, value in changes.items():
        setattr(existing, field, value)
    if request.status is not None:
        existing.mark_status(request.status)

    updated = await stores.reports.update(existing)
    logger.info("incident_report_updated", report_id=report_id, status=updated.status.value)
    return IncidentReportResponse.model_validate(updated)


@router.delete(
    "/{report_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_report(
    report_id: int,
    stores: StoreBundle = Depends(get_store_bundle),
    actor: Actor | None = Depends(require_permission(Action.EDIT_REPORTS)),
) -> None:
    """Delete an incident report."""
    if not await stores.reports.delete(report_id):
        raise IncidentReportNotFoundError(report_id)
