"""
Goal tracking: which goals count in a view, their current values, and completion counts.

A goal contributes to every view at least as coarse as its own frequency:
a daily goal shows in daily, weekly, monthly, ... views; a monthly goal only
in monthly and coarser ones.
"""

from dataclasses import dataclass
from datetime import datetime

from core.aggregation import aggregate, percentage
from core.buckets import Bucket, TimeUnit, bucket_bounds, parse_unit
from core.errors import UnsupportedUnit
from core.intervals import format_timestamp

STATUS_MET = "Met"
STATUS_MISSED = "Missed"


@dataclass(frozen=True)
class GoalCompletion:
    goal_id: str
    target: float
    current: float
    unit: TimeUnit

    @property
    def completed(self) -> bool:
        return self.current >= self.target

    @property
    def progress(self) -> float:
        """Percent of target reached (uncapped)."""
        return percentage(self.current, self.target)

    def to_dict(self) -> dict:
        return {
            "goalId": self.goal_id,
            "target": self.target,
            "current": self.current,
            "unit": self.unit.value,
            "completed": self.completed,
            "progress": self.progress,
        }


@dataclass(frozen=True)
class GoalCounts:
    completed: int
    total: int

    @property
    def display(self) -> str:
        return f"{self.completed}/{self.total}"

    @property
    def completion_rate(self) -> float:
        return percentage(self.completed, self.total)

    def to_dict(self) -> dict:
        return {
            "completed": self.completed,
            "total": self.total,
            "display": self.display,
            "completionRate": self.completion_rate,
        }


def goal_unit(goal: dict) -> TimeUnit:
    """
    Raises:
        UnsupportedUnit: if the goal's frequency is not a known timeframe
    """
    return parse_unit(goal.get("frequency"))


def goals_in_view(goals: list[dict], view_unit: str | TimeUnit) -> list[dict]:
    """Goals whose frequency is no coarser than the view; unknown frequencies are left out."""
    view_unit = parse_unit(view_unit)
    selected = []
    for goal in goals:
        try:
            unit = goal_unit(goal)
        except UnsupportedUnit:
            continue
        if unit.rank <= view_unit.rank:
            selected.append(goal)
    return selected


def goal_tracking_rule(goal: dict) -> str:
    """
    How a goal's current value is measured, from its type.

    Returns one of 'non_billable_hours', 'billable_hours', 'total_hours', 'manual'.
    """
    goal_type = str(goal.get("type") or goal.get("title") or "").lower()
    if "non-billable" in goal_type or "non billable" in goal_type or "nonbillable" in goal_type:
        return "non_billable_hours"
    if "billable" in goal_type:
        return "billable_hours"
    if "hours" in goal_type or "time" in goal_type:
        return "total_hours"
    return "manual"


def _stored_value(goal: dict, *names: str) -> float:
    for name in names:
        value = goal.get(name)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
    return 0.0


def goal_current_value(
    goal: dict, entries: list[dict], now: datetime, user_id: str | None = None
) -> float:
    """
    Current value of a goal in its own bucket for ``now``.

    Hours are counted for the goal owner, or ``user_id`` when the goal has none.
    """
    rule = goal_tracking_rule(goal)
    if rule == "manual":
        return _stored_value(goal, "current", "actual")

    bucket = bucket_bounds(now, goal_unit(goal))
    summary = aggregate(entries, bucket, user_id=goal.get("userId") or user_id)
    if rule == "billable_hours":
        return summary.billable_hours
    if rule == "non_billable_hours":
        return summary.non_billable_hours
    return summary.total_hours


def evaluate_goals(
    goals: list[dict],
    entries: list[dict],
    now: datetime,
    view_unit: str | TimeUnit,
    user_id: str | None = None,
) -> list[GoalCompletion]:
    """Completion state of each goal that counts in the view; goals without an id are left out."""
    completions = []
    for goal in goals_in_view(goals, view_unit):
        if not goal.get("id"):
            continue
        completions.append(
            GoalCompletion(
                goal_id=str(goal.get("id")),
                target=_stored_value(goal, "target"),
                current=goal_current_value(goal, entries, now, user_id),
                unit=goal_unit(goal),
            )
        )
    return completions


def goal_completion_counts(completions: list[GoalCompletion]) -> GoalCounts:
    return GoalCounts(
        completed=sum(1 for completion in completions if completion.completed),
        total=len(completions),
    )


def goal_history_record(
    goal: dict,
    completion: GoalCompletion,
    now: datetime,
    user_id: str | None = None,
) -> dict:
    """Met/Missed record for a goal's period, ready to persist."""
    period: Bucket = bucket_bounds(now, completion.unit)
    return {
        "goalId": completion.goal_id,
        "userId": goal.get("userId") or user_id,
        "goalName": goal.get("title") or goal.get("name") or "",
        "goalType": goal.get("type") or "",
        "frequency": completion.unit.value,
        "targetValue": completion.target,
        "actualValue": completion.current,
        "status": STATUS_MET if completion.completed else STATUS_MISSED,
        "periodStart": format_timestamp(period.start),
        "periodEnd": format_timestamp(period.end),
        "completionDate": format_timestamp(now),
        "goalScope": "TEAM" if str(goal.get("scope") or "").upper() == "TEAM" else "PERSONAL",
    }
