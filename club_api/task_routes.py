"""Task reminder API routes.

Called by the portal when a task is created, edited or assigned:
- Schedule lead-time reminders for a task
- Send immediate assignment notifications
- Trigger a sweep or cleanup manually (admin / testing)
"""

from datetime import datetime, timedelta
from typing import List, Optional, Union

from fastapi import APIRouter, HTTPException, Query, Request
from pydantic import BaseModel, Field

from domains.tasks import ReminderSchedulingError, ReminderServices, Task
from logger import logger
from utils.redact import describe_error

router = APIRouter(tags=["Task Reminders"])


# ============================================================
# Pydantic Models
# ============================================================

class TaskReminderRequest(BaseModel):
    """Task fields needed to schedule or announce reminders."""
    title: str
    meeting_label: str = Field(..., description="Meeting name shown in the message")
    due_at: Optional[Union[datetime, int, str]] = None
    club_id: Optional[str] = None
    description: Optional[str] = None
    assignees: List[str] = Field(default_factory=list)


class ScheduledReminder(BaseModel):
    id: str
    recipient_id: str
    offset_kind: str
    fire_at: int


class ScheduleResponse(BaseModel):
    task_id: str
    scheduled: List[ScheduledReminder]


class AssignmentResult(BaseModel):
    recipient_id: str
    sent: bool
    error: Optional[str] = None


class SweepResponse(BaseModel):
    due: int
    delivered: int
    failed: int
    dead_lettered: int


class CleanupResponse(BaseModel):
    deleted: int


# ============================================================
# Helper Functions
# ============================================================

def get_services(request: Request) -> ReminderServices:
    services = getattr(request.app.state, "reminder_services", None)
    if services is None:
        raise HTTPException(status_code=503, detail="Reminder services not initialised")
    return services


def to_task(task_id: str, payload: TaskReminderRequest) -> Task:
    return Task(
        id=task_id,
        title=payload.title,
        meeting_label=payload.meeting_label,
        due_at=payload.due_at,
        club_id=payload.club_id,
        description=payload.description,
    )


# ============================================================
# Endpoints
# ============================================================

@router.post("/tasks/{task_id}/reminders", response_model=ScheduleResponse)
async def schedule_task_reminders(task_id: str, payload: TaskReminderRequest, request: Request):
    """Schedule reminders for every assignee of a task."""
    services = get_services(request)

    try:
        records = await services.scheduler.schedule(to_task(task_id, payload), payload.assignees)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=f"Invalid due_at: {e}")
    except ReminderSchedulingError as e:
        raise HTTPException(status_code=502, detail={
            "message": str(e),
            "written": [r.id for r in e.created],
            "failed": [
                {"recipient_id": recipient, "offset_kind": offset.value, "error": describe_error(err)}
                for recipient, offset, err in e.failures
            ],
        })

    return ScheduleResponse(
        task_id=task_id,
        scheduled=[
            ScheduledReminder(
                id=r.id,
                recipient_id=r.recipient_id,
                offset_kind=r.offset_value,
                fire_at=r.fire_at,
            )
            for r in records
        ],
    )


@router.post("/tasks/{task_id}/assignments", response_model=List[AssignmentResult])
async def notify_task_assignment(task_id: str, payload: TaskReminderRequest, request: Request):
    """Send the 'new task assigned' notification to each assignee.

    Failures are reported per recipient rather than raised: the assignment
    has already been saved by the portal.
    """
    services = get_services(request)
    task = to_task(task_id, payload)

    results = []
    for recipient_id in dict.fromkeys(payload.assignees):
        try:
            await services.notifier.notify_assignment(recipient_id, task)
            results.append(AssignmentResult(recipient_id=recipient_id, sent=True))
        except Exception as e:
            error = describe_error(e)
            logger.error(f"Error sending task assignment notification to {recipient_id}: {error}")
            results.append(AssignmentResult(recipient_id=recipient_id, sent=False, error=error))

    return results


@router.post("/reminders/sweep", response_model=SweepResponse)
async def run_reminder_sweep(request: Request):
    """Deliver due reminders now."""
    services = get_services(request)

    try:
        result = await services.sweeper.process_due()
    except Exception as e:
        raise HTTPException(status_code=503, detail=f"Sweep failed: {describe_error(e)}")

    return SweepResponse(**result.to_dict())


@router.post("/reminders/cleanup", response_model=CleanupResponse)
async def run_reminder_cleanup(request: Request, retention_days: Optional[int] = Query(default=None, ge=0)):
    """Delete delivered reminders older than the retention window."""
    services = get_services(request)
    window = timedelta(days=retention_days) if retention_days is not None else None

    try:
        deleted = await services.janitor.cleanup(window)
    except Exception as e:
        raise HTTPException(status_code=503, detail=f"Cleanup failed: {describe_error(e)}")

    return CleanupResponse(deleted=deleted)
