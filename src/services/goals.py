"""
Goal evaluation shared by the API routes and the scripts.

``userId`` arrives as a user id, "all" or nothing; all three entry points
normalize it here so they select and measure the same goals.
"""

from datetime import datetime

from core.aggregation import ALL_USERS
from core.buckets import TimeUnit
from core.goals import GoalCompletion, evaluate_goals, goal_history_record


def normalize_user(user_id: str | None) -> str | None:
    """None for "everyone" (missing, empty or "all"), else the user id."""
    if not user_id or user_id == ALL_USERS:
        return None
    return user_id


def goals_for_user(goals: list[dict], user_id: str | None) -> list[dict]:
    """Goals owned by the user plus goals without an owner; every goal for everyone."""
    user_id = normalize_user(user_id)
    if user_id is None:
        return list(goals)
    return [goal for goal in goals if goal.get("userId") in (None, user_id)]


def evaluate_user_goals(
    goals: list[dict],
    entries: list[dict],
    now: datetime,
    view_unit: str | TimeUnit,
    user_id: str | None = None,
) -> tuple[list[dict], list[GoalCompletion]]:
    """
    Select the user's goals and evaluate those that count in the view.

    Returns the selected goals together with their completions.

    Raises:
        UnsupportedUnit: for an unknown view unit
    """
    user_id = normalize_user(user_id)
    goals = goals_for_user(goals, user_id)
    completions = evaluate_goals(goals, entries, now, view_unit, user_id=user_id)
    return goals, completions


def goal_history_records(
    goals: list[dict],
    entries: list[dict],
    now: datetime,
    view_unit: str | TimeUnit,
    user_id: str | None = None,
) -> list[dict]:
    """Met/Missed records for every goal in view, ready for ``insert_goal_history``."""
    user_id = normalize_user(user_id)
    goals, completions = evaluate_user_goals(goals, entries, now, view_unit, user_id)
    goals_by_id = {str(goal["id"]): goal for goal in goals if goal.get("id")}
    return [
        goal_history_record(goals_by_id[completion.goal_id], completion, now, user_id)
        for completion in completions
    ]
