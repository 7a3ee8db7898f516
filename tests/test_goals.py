"""Tests for goal views, current values and completion counts."""

from datetime import datetime

import pytest

from core.buckets import TimeUnit
from core.goals import (
    STATUS_MET,
    STATUS_MISSED,
    GoalCompletion,
    evaluate_goals,
    goal_completion_counts,
    goal_current_value,
    goal_history_record,
    goal_tracking_rule,
    goals_in_view,
)

NOW = datetime(2025, 8, 12, 18).astimezone()


def ids(goals):
    return [goal["id"] for goal in goals]


class TestGoalsInView:
    @pytest.mark.parametrize("view", ["daily", "weekly"])
    def test_fine_views_only_show_daily_goal(self, sample_goals, view):
        assert ids(goals_in_view(sample_goals, view)) == ["goal-daily"]

    @pytest.mark.parametrize("view", ["monthly", "quarterly", "yearly"])
    def test_coarse_views_show_both(self, sample_goals, view):
        assert ids(goals_in_view(sample_goals, view)) == ["goal-daily", "goal-monthly"]

    def test_annual_alias_on_goal(self, sample_goals):
        goals = [*sample_goals, {**sample_goals[0], "id": "goal-annual", "frequency": "annual"}]
        assert "goal-annual" in ids(goals_in_view(goals, "yearly"))
        assert "goal-annual" not in ids(goals_in_view(goals, "quarterly"))

    def test_unknown_frequency_left_out(self, sample_goals):
        goals = [*sample_goals, {**sample_goals[0], "id": "goal-odd", "frequency": "hourly"}]
        assert "goal-odd" not in ids(goals_in_view(goals, "yearly"))


class TestTrackingRule:
    @pytest.mark.parametrize(
        "goal_type, rule",
        [
            ("billable_hours", "billable_hours"),
            ("Non-billable time", "non_billable_hours"),
            ("nonbillable", "non_billable_hours"),
            ("total hours", "total_hours"),
            ("CASES_CLOSED", "manual"),
        ],
    )
    def test_rules(self, goal_type, rule):
        assert goal_tracking_rule({"type": goal_type}) == rule


class TestCurrentValue:
    def test_daily_billable(self, sample_goals, sample_entries):
        assert goal_current_value(sample_goals[0], sample_entries, NOW) == 6.0

    def test_monthly_billable(self, sample_goals, sample_entries):
        assert goal_current_value(sample_goals[1], sample_entries, NOW) == 9.0

    def test_ownerless_goal_uses_requesting_user(self, sample_goals, sample_entries):
        goal = {**sample_goals[0], "userId": None}
        assert goal_current_value(goal, sample_entries, NOW, user_id="dana") == 5.0

    def test_manual_goal_reads_stored_value(self, sample_entries):
        goal = {"id": "goal-cases", "type": "cases_closed", "frequency": "monthly",
                "target": 3, "current": 2}
        assert goal_current_value(goal, sample_entries, NOW) == 2.0


class TestCompletion:
    def test_daily_view_counts_daily_goal(self, sample_goals, sample_entries):
        completions = evaluate_goals(sample_goals, sample_entries, NOW, "daily")
        counts = goal_completion_counts(completions)

        assert counts.display == "1/1"
        assert counts.completion_rate == 100.0

    def test_monthly_view_counts_both(self, sample_goals, sample_entries):
        completions = evaluate_goals(sample_goals, sample_entries, NOW, TimeUnit.MONTH)
        counts = goal_completion_counts(completions)

        assert counts.to_dict() == {
            "completed": 1,
            "total": 2,
            "display": "1/2",
            "completionRate": 50.0,
        }

    def test_goal_without_id_left_out(self, sample_goals, sample_entries):
        anonymous = {**sample_goals[0], "id": None}
        completions = evaluate_goals([anonymous, sample_goals[1]], sample_entries, NOW, "monthly")

        assert [completion.goal_id for completion in completions] == ["goal-monthly"]

    def test_no_goals(self):
        assert goal_completion_counts([]).display == "0/0"
        assert goal_completion_counts([]).completion_rate == 0.0

    def test_completion_to_dict(self):
        completion = GoalCompletion(goal_id="goal-1", target=8, current=6, unit=TimeUnit.DAY)

        assert completion.to_dict() == {
            "goalId": "goal-1",
            "target": 8,
            "current": 6,
            "unit": "daily",
            "completed": False,
            "progress": 75.0,
        }


class TestHistoryRecord:
    def test_met_record(self, sample_goals, sample_entries):
        completion = evaluate_goals(sample_goals, sample_entries, NOW, "daily")[0]
        record = goal_history_record(sample_goals[0], completion, NOW)

        assert record["status"] == STATUS_MET
        assert record["goalId"] == "goal-daily"
        assert record["userId"] == "cole"
        assert record["frequency"] == "daily"
        assert record["actualValue"] == 6.0
        assert record["goalScope"] == "PERSONAL"

    def test_missed_team_record(self, sample_goals, sample_entries):
        goal = {**sample_goals[1], "scope": "team"}
        completion = evaluate_goals([goal], sample_entries, NOW, "monthly")[0]
        record = goal_history_record(goal, completion, NOW)

        assert record["status"] == STATUS_MISSED
        assert record["goalScope"] == "TEAM"
        assert record["periodStart"] < record["periodEnd"]
