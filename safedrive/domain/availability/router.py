"""Availability router - FastAPI endpoints for the owner availability editor"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import Profile
from ..calendar.router import to_calendar_response
from ..calendar.schemas import StagedEditSchema
from .editor import EditState
from .schemas import (
    AppliedEditSchema,
    CommitRequest,
    CommitResponse,
    RejectedEditSchema,
    StageEditRequest,
    StageEditResponse,
)
from .service import AvailabilityService

router = APIRouter(prefix="/vehicles", tags=["Availability"])


def get_availability_service(db: Session = Depends(get_db)) -> AvailabilityService:
    """Dependency injection for AvailabilityService"""
    return AvailabilityService(db)


def to_edit_state(vehicle_id: int, staged: list[StagedEditSchema]) -> EditState:
    return EditState.from_items(
        vehicle_id, ((edit.date, edit.action, edit.reason) for edit in staged)
    )


def to_staged_schemas(state: EditState) -> list[StagedEditSchema]:
    return [
        StagedEditSchema(date=day, action=edit.action, reason=edit.reason)
        for day, edit in sorted(state.staged.items())
    ]


@router.post("/{vehicle_id}/availability/stage", response_model=StageEditResponse)
async def stage_edit(
    vehicle_id: int,
    data: StageEditRequest,
    current_user: Profile = Depends(get_current_user),
    service: AvailabilityService = Depends(get_availability_service),
):
    """Toggle a block/unblock intent for one day; nothing is saved until commit"""
    state = to_edit_state(vehicle_id, data.staged)
    state = service.stage_edit(vehicle_id, data.date, state, current_user, data.reason)
    window = service.preview(state, data.month or data.date.strftime("%Y-%m"))

    return StageEditResponse(
        vehicleId=vehicle_id,
        staged=to_staged_schemas(state),
        calendar=to_calendar_response(vehicle_id, window),
    )


@router.post("/{vehicle_id}/availability/commit", response_model=CommitResponse)
async def commit_edits(
    vehicle_id: int,
    data: CommitRequest,
    current_user: Profile = Depends(get_current_user),
    service: AvailabilityService = Depends(get_availability_service),
):
    """Save staged edits; each day is reported as applied or rejected"""
    result = service.commit(to_edit_state(vehicle_id, data.staged), current_user)

    changes = len(result.applied)
    message = f"Saved {changes} change{'s' if changes != 1 else ''}"
    if result.rejected:
        message += f", {len(result.rejected)} rejected"

    return CommitResponse(
        message=message,
        applied=[AppliedEditSchema(date=day, action=action) for day, action in result.applied],
        rejected=[
            RejectedEditSchema(
                date=item.date, action=item.action, reason=item.reason, message=item.message
            )
            for item in result.rejected
        ],
        added=result.added,
        removed=result.removed,
        blockedTotal=result.blocked_total,
        staged=to_staged_schemas(result.state),
    )
