"""
Staged availability edits.

An owner clicks days on the calendar; each click toggles a pending block/unblock
intent. Intents live only in an ``EditState`` value that the client carries between
requests and hands back to ``commit``. Nothing here touches storage.
"""

from dataclasses import dataclass, field, replace
from datetime import date
from typing import Iterable, Mapping

from ...models import MARK_REASONS
from ...shared.errors import DateConflict, ValidationError
from ..calendar.calendar_state import DayStatus, EditAction


@dataclass(frozen=True)
class StagedEdit:
    action: EditAction
    reason: str = "blocked"


@dataclass(frozen=True)
class EditState:
    vehicle_id: int
    staged: Mapping[date, StagedEdit] = field(default_factory=dict)

    @property
    def actions(self) -> dict[date, EditAction]:
        return {day: edit.action for day, edit in self.staged.items()}

    @property
    def to_add(self) -> list[date]:
        return sorted(day for day, edit in self.staged.items() if edit.action == EditAction.ADD)

    @property
    def to_remove(self) -> list[date]:
        return sorted(day for day, edit in self.staged.items() if edit.action == EditAction.REMOVE)

    def __len__(self) -> int:
        return len(self.staged)

    def cleared(self) -> "EditState":
        return replace(self, staged={})

    @classmethod
    def from_items(cls, vehicle_id: int, items: Iterable[tuple[date, EditAction, str]]) -> "EditState":
        """Rebuild a state sent back by a client; a later entry for the same day wins"""
        staged = {}
        for day, action, reason in items:
            staged[day] = StagedEdit(EditAction(action), validate_reason(reason))
        return cls(vehicle_id=vehicle_id, staged=staged)


def validate_reason(reason: str) -> str:
    reason = (reason or "blocked").strip().lower()
    if reason not in MARK_REASONS:
        raise ValidationError(
            f"Block reason must be one of {', '.join(MARK_REASONS)}, got '{reason}'"
        )
    return reason


def toggle_day(
    state: EditState, day: date, committed_status: DayStatus, reason: str = "blocked"
) -> EditState:
    """
    Apply click-to-toggle semantics for one day and return the new state.

    ``committed_status`` is the day's status without any staged overlay:
    - available day, nothing staged -> stage ``add``
    - blocked day, nothing staged -> stage ``remove``
    - anything already staged -> drop the intent

    Raises:
        ValidationError: For a past day
        DateConflict: For a day covered by a live booking
    """
    if committed_status == DayStatus.PAST:
        raise ValidationError(f"{day.isoformat()} is in the past and cannot be changed", day=day)
    if committed_status == DayStatus.BOOKED:
        raise DateConflict(day, f"{day.isoformat()} has an active booking and cannot be blocked")

    staged = dict(state.staged)
    if day in staged:
        del staged[day]
    elif committed_status == DayStatus.BLOCKED:
        staged[day] = StagedEdit(EditAction.REMOVE)
    else:
        staged[day] = StagedEdit(EditAction.ADD, validate_reason(reason))

    return replace(state, staged=staged)
