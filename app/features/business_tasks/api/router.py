"""
Business task dashboard routes.

Every route is scoped to the authenticated provider (JWT `sub`) and requires
an artist or admin role.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from app.auth.verify import provider_dependency
from app.db.helpers import DatabaseError
from app.features.business_tasks.errors import TaskServiceError
from app.features.business_tasks.services.completion_service import completion_service
from app.features.business_tasks.services.quick_stats_service import quick_stats_service
from app.features.business_tasks.services.settings_service import settings_service
from app.features.business_tasks.services.snapshot_service import snapshot_service
from app.features.business_tasks.services.task_service import task_service
from app.infrastructure.observability.logging import get_logger
from app.models.api.dashboard_request import (
    CompleteTaskRequest,
    StartTaskRequest,
    UpdateSettingsRequest,
)
from app.models.api.dashboard_response import (
    BusinessTaskResponse,
    CompleteTaskResponse,
    DashboardSettingsResponse,
    QuickStatsResponse,
    ShouldShowSnapshotResponse,
    StartTaskResponse,
    SuccessResponse,
    TaskListResponse,
    TaskListSettings,
    WeeklySnapshotResponse,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/dashboard/tasks", tags=["dashboard-tasks"])


def _database_failure(action: str, provider_id: str, error: DatabaseError) -> HTTPException:
    logger.error(
        f"Error {action}",
        provider_id=provider_id,
        operation=error.operation,
        error=str(error),
    )
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Failed {action}"
    )


@router.get("", response_model=TaskListResponse)
async def get_business_tasks(claims: dict = Depends(provider_dependency)):
    """Ranked next-best-actions for the dashboard."""
    provider_id = claims["sub"]

    try:
        dashboard_settings = await settings_service.ensure_settings(provider_id)
        tasks = await task_service.generate_business_tasks(
            provider_id, dashboard_settings.max_visible_tasks
        )
    except DatabaseError as e:
        raise _database_failure("generating tasks", provider_id, e) from e

    return TaskListResponse(
        tasks=[BusinessTaskResponse.from_domain(task) for task in tasks],
        settings=TaskListSettings(
            max_visible_tasks=dashboard_settings.max_visible_tasks,
            preferred_email_client=dashboard_settings.preferred_email_client,
        ),
    )


@router.post("/start", response_model=StartTaskResponse)
async def start_task(request: StartTaskRequest, claims: dict = Depends(provider_dependency)):
    provider_id = claims["sub"]

    try:
        started_at = await completion_service.start_task(provider_id, request.to_domain())
    except DatabaseError as e:
        raise _database_failure("starting task", provider_id, e) from e

    return StartTaskResponse(started_at=started_at)


@router.post("/complete", response_model=CompleteTaskResponse)
async def complete_task(
    request: CompleteTaskRequest, claims: dict = Depends(provider_dependency)
):
    provider_id = claims["sub"]

    try:
        completion = await completion_service.complete_task(
            provider_id,
            request.to_domain(),
            started_at=request.started_at,
            action_taken=request.action_taken,
        )
    except TaskServiceError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    except DatabaseError as e:
        raise _database_failure("completing task", provider_id, e) from e

    return CompleteTaskResponse(
        time_to_complete_seconds=completion.time_to_complete_seconds,
        duration_clamped=completion.duration_clamped,
    )


@router.get("/settings", response_model=DashboardSettingsResponse)
async def get_dashboard_settings(claims: dict = Depends(provider_dependency)):
    provider_id = claims["sub"]

    try:
        dashboard_settings = await settings_service.get_settings(provider_id)
    except DatabaseError as e:
        raise _database_failure("loading settings", provider_id, e) from e

    return DashboardSettingsResponse.from_domain(dashboard_settings)


@router.put("/settings", response_model=DashboardSettingsResponse)
async def update_dashboard_settings(
    request: UpdateSettingsRequest, claims: dict = Depends(provider_dependency)
):
    provider_id = claims["sub"]

    try:
        dashboard_settings = await settings_service.update_settings(
            provider_id, **request.model_dump(exclude_none=True)
        )
    except TaskServiceError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    except DatabaseError as e:
        raise _database_failure("updating settings", provider_id, e) from e

    return DashboardSettingsResponse.from_domain(dashboard_settings)


@router.get("/weekly-snapshot", response_model=WeeklySnapshotResponse)
async def get_weekly_snapshot(claims: dict = Depends(provider_dependency)):
    provider_id = claims["sub"]

    try:
        snapshot = await snapshot_service.get_weekly_snapshot(provider_id)
    except DatabaseError as e:
        raise _database_failure("computing weekly snapshot", provider_id, e) from e

    return WeeklySnapshotResponse.from_domain(snapshot)


@router.get("/weekly-snapshot/should-show", response_model=ShouldShowSnapshotResponse)
async def should_show_weekly_snapshot(claims: dict = Depends(provider_dependency)):
    provider_id = claims["sub"]

    try:
        should_show = await settings_service.should_show_weekly_snapshot(provider_id)
    except DatabaseError as e:
        logger.warning(
            "Snapshot cadence check failed, hiding snapshot",
            provider_id=provider_id,
            error=str(e),
        )
        should_show = False

    return ShouldShowSnapshotResponse(should_show=should_show)


@router.post("/weekly-snapshot/dismiss", response_model=SuccessResponse)
async def dismiss_weekly_snapshot(claims: dict = Depends(provider_dependency)):
    provider_id = claims["sub"]

    try:
        await settings_service.dismiss_weekly_snapshot(provider_id)
    except DatabaseError as e:
        raise _database_failure("dismissing weekly snapshot", provider_id, e) from e

    return SuccessResponse()


@router.get("/quick-stats", response_model=QuickStatsResponse)
async def get_quick_stats(claims: dict = Depends(provider_dependency)):
    provider_id = claims["sub"]

    try:
        stats = await quick_stats_service.get_quick_stats(provider_id)
    except DatabaseError as e:
        raise _database_failure("loading quick stats", provider_id, e) from e

    return QuickStatsResponse.from_domain(stats)
