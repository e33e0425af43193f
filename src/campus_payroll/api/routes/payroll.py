"""Payroll record API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Body, Path, Query, status

from campus_payroll.api.dependencies import DbSession, LifecycleManager, Notifications
from campus_payroll.api.schemas import (
    ApprovalRequest,
    ErrorResponse,
    GenerationFailureResponse,
    GenerationResponse,
    MarkPaidRequest,
    MonthSummaryResponse,
    NotificationResponse,
    PayrollRecordListResponse,
    PayrollRecordResponse,
)
from campus_payroll.services import PayrollStatus

router = APIRouter(tags=["payroll"])


# ============================================================================
# Individual records
# ============================================================================


@router.get(
    "/payroll/records/{record_id}",
    response_model=PayrollRecordResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_payroll_record(
    manager: LifecycleManager,
    record_id: Annotated[UUID, Path()],
) -> PayrollRecordResponse:
    """Get a specific payroll record by ID."""
    record = await manager.get_record(record_id)
    return PayrollRecordResponse.model_validate(record)


@router.post(
    "/payroll/records/{record_id}/approve",
    response_model=PayrollRecordResponse,
    responses={
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)
async def approve_payroll_record(
    db: DbSession,
    manager: LifecycleManager,
    record_id: Annotated[UUID, Path()],
    payload: ApprovalRequest,
) -> PayrollRecordResponse:
    """Approve a draft payroll record."""
    record = await manager.approve(record_id, payload.approved_by)
    await db.commit()
    return PayrollRecordResponse.model_validate(record)


@router.post(
    "/payroll/records/{record_id}/mark-paid",
    response_model=PayrollRecordResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def mark_payroll_record_paid(
    db: DbSession,
    manager: LifecycleManager,
    record_id: Annotated[UUID, Path()],
    payload: Annotated[MarkPaidRequest | None, Body()] = None,
) -> PayrollRecordResponse:
    """Mark an approved payroll record as paid."""
    actor = payload.actor if payload is not None else None
    record = await manager.mark_paid(record_id, actor=actor)
    await db.commit()
    return PayrollRecordResponse.model_validate(record)


# ============================================================================
# Monthly operations
# ============================================================================


@router.post(
    "/payroll/{month}/generate",
    response_model=GenerationResponse,
    status_code=status.HTTP_200_OK,
    responses={422: {"model": ErrorResponse}},
)
async def generate_monthly_payroll(
    db: DbSession,
    manager: LifecycleManager,
    month: Annotated[str, Path()],
) -> GenerationResponse:
    """Generate (or regenerate) payroll for every active employee.

    Per-employee failures are reported in the response; successful
    records are committed regardless.
    """
    result = await manager.generate_monthly_payroll(month)
    await db.commit()

    return GenerationResponse(
        month=result.month,
        generated_count=len(result.records),
        failed_count=len(result.failures),
        records=[PayrollRecordResponse.model_validate(r) for r in result.records],
        failures=[GenerationFailureResponse.model_validate(f) for f in result.failures],
    )


@router.get(
    "/payroll/{month}",
    response_model=PayrollRecordListResponse,
    responses={422: {"model": ErrorResponse}},
)
async def list_monthly_payroll(
    manager: LifecycleManager,
    month: Annotated[str, Path()],
    status_filter: Annotated[PayrollStatus | None, Query(alias="status")] = None,
) -> PayrollRecordListResponse:
    """List a month's records, most recently generated first."""
    records = await manager.list_month(month, status_filter)
    return PayrollRecordListResponse(
        items=[PayrollRecordResponse.model_validate(r) for r in records],
        total=len(records),
    )


@router.get(
    "/payroll/{month}/summary",
    response_model=MonthSummaryResponse,
    responses={422: {"model": ErrorResponse}},
)
async def summarize_monthly_payroll(
    manager: LifecycleManager,
    month: Annotated[str, Path()],
) -> MonthSummaryResponse:
    """Draft/approved/paid counts and payout totals for a month."""
    summary = await manager.summarize_month(month)
    return MonthSummaryResponse.model_validate(summary)


# ============================================================================
# Notifications
# ============================================================================


@router.get("/notifications", response_model=list[NotificationResponse])
async def list_notifications(
    notifications: Notifications,
    limit: Annotated[int, Query(ge=1, le=500)] = 50,
) -> list[NotificationResponse]:
    """Most recent payroll events, newest first."""
    events = notifications.events[-limit:]
    return [
        NotificationResponse(event_type=e.event_type, payload=e.to_dict())
        for e in reversed(events)
    ]
