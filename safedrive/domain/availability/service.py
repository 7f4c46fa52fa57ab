"""Availability service - Owner block/unblock staging and commit"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...models import Profile, Vehicle
from ...shared.errors import NotAuthorized, NotFoundError
from ..calendar.calendar_state import CalendarWindow, DayStatus, EditAction
from ..calendar.repository import CalendarRepository
from ..calendar.service import CalendarService
from .editor import EditState, toggle_day
from .repository import AvailabilityRepository

logger = logging.getLogger(__name__)


@dataclass
class RejectedEdit:
    date: date
    action: EditAction
    reason: str  # past, booked, storage_error
    message: str


@dataclass
class CommitResult:
    applied: list[tuple[date, EditAction]] = field(default_factory=list)
    rejected: list[RejectedEdit] = field(default_factory=list)
    added: int = 0
    removed: int = 0
    blocked_total: int = 0  # Marks on today or later after the commit
    state: Optional[EditState] = None


class AvailabilityService:
    """Service layer for the owner availability editor"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AvailabilityRepository()
        self.calendar_repo = CalendarRepository()
        self.calendar = CalendarService(db)

    def _get_owned_vehicle(self, vehicle_id: int, owner: Profile) -> Vehicle:
        vehicle = self.calendar_repo.get_vehicle(self.db, vehicle_id)
        if not vehicle:
            raise NotFoundError(f"Vehicle {vehicle_id} not found")
        if vehicle.owner_id != owner.id:
            raise NotAuthorized("Only the vehicle owner can change its availability")
        return vehicle

    def stage_edit(
        self,
        vehicle_id: int,
        day: date,
        state: Optional[EditState],
        owner: Profile,
        reason: str = "blocked",
        today: Optional[date] = None,
    ) -> EditState:
        """Toggle the staged intent for one day; storage is only read"""
        self._get_owned_vehicle(vehicle_id, owner)
        state = state or EditState(vehicle_id=vehicle_id)
        if state.vehicle_id != vehicle_id:
            state = EditState(vehicle_id=vehicle_id)

        committed = self.calendar.day_status(vehicle_id, day, today)
        return toggle_day(state, day, committed, reason)

    def preview(
        self,
        state: EditState,
        year_month: Optional[str] = None,
        today: Optional[date] = None,
    ) -> CalendarWindow:
        """Committed calendar with the staged intents overlaid"""
        return self.calendar.get_calendar(state.vehicle_id, year_month, state.actions, today)

    def _committed_status(self, vehicle_id: int, day: date, today: date) -> DayStatus:
        if day < today:
            return DayStatus.PAST
        if self.repo.is_day_claimed(self.db, vehicle_id, day):
            return DayStatus.BOOKED
        return self.calendar.day_status(vehicle_id, day, today)

    def commit(
        self, state: EditState, owner: Profile, today: Optional[date] = None
    ) -> CommitResult:
        """
        Apply every staged intent as its own locked, idempotent write.

        Adds on past or booked days are rejected without writing. A storage failure on
        one day is rolled back and reported while the remaining days still proceed.
        """
        today = today or date.today()
        vehicle = self._get_owned_vehicle(state.vehicle_id, owner)
        result = CommitResult()

        for day in sorted(state.staged):
            edit = state.staged[day]
            try:
                self.calendar_repo.lock_vehicle(self.db, vehicle.id)
                status = self._committed_status(vehicle.id, day, today)

                if status == DayStatus.PAST:
                    self.db.rollback()
                    result.rejected.append(
                        RejectedEdit(
                            day, edit.action, "past", f"{day.isoformat()} is in the past"
                        )
                    )
                    continue

                if edit.action == EditAction.ADD:
                    if status == DayStatus.BOOKED:
                        self.db.rollback()
                        result.rejected.append(
                            RejectedEdit(
                                day,
                                edit.action,
                                "booked",
                                f"{day.isoformat()} has an active booking and cannot be blocked",
                            )
                        )
                        continue
                    self.repo.upsert_mark(self.db, vehicle.id, day, edit.reason)
                    self.db.commit()
                    result.added += 1
                else:
                    self.repo.delete_mark(self.db, vehicle.id, day)
                    self.db.commit()
                    result.removed += 1

                result.applied.append((day, edit.action))
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.error(
                    f"❌ Failed to {edit.action.value} block for vehicle {vehicle.id} on {day}: {e}"
                )
                result.rejected.append(
                    RejectedEdit(
                        day,
                        edit.action,
                        "storage_error",
                        f"Could not save the change for {day.isoformat()}, please retry",
                    )
                )

        result.blocked_total = self.calendar_repo.count_marks(self.db, vehicle.id, today)
        result.state = state.cleared()

        logger.info(
            f"✅ Availability commit for vehicle {vehicle.id}: "
            f"+{result.added} -{result.removed}, {len(result.rejected)} rejected"
        )
        return result
