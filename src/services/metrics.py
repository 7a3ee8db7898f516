"""
Dashboard metrics built on the aggregation engine.
"""

from datetime import datetime

from core.aggregation import aggregate, aggregate_by, percentage, round_hours
from core.buckets import bucket_bounds, day_buckets, parse_unit
from core.config import BREAKDOWN_DAYS
from core.goals import goal_completion_counts
from services.goals import evaluate_user_goals


def billable_hours_metrics(
    entries: list[dict],
    timeframe: str,
    now: datetime,
    user_id: str | None = None,
    breakdown_days: int = BREAKDOWN_DAYS,
) -> dict:
    """
    Hour totals for the timeframe bucket containing ``now``.

    Includes a trailing daily breakdown and a per-user breakdown.

    Raises:
        UnsupportedUnit: for an unknown timeframe
    """
    unit = parse_unit(timeframe)
    bucket = bucket_bounds(now, unit)
    summary = aggregate(entries, bucket, user_id=user_id)

    daily_breakdown = []
    for day in day_buckets(now, breakdown_days):
        day_summary = aggregate(entries, day, user_id=user_id)
        daily_breakdown.append(
            {
                "date": day.start_date.isoformat(),
                "billableHours": day_summary.billable_hours,
                "nonBillableHours": day_summary.non_billable_hours,
                "totalHours": day_summary.total_hours,
                "billableRate": day_summary.billable_rate,
            }
        )

    by_user = aggregate_by(entries, bucket, "userId", user_id=user_id)

    return {
        "timeframe": unit.value,
        "bucket": bucket.to_dict(),
        "totalBillableHours": summary.billable_hours,
        "totalNonBillableHours": summary.non_billable_hours,
        "totalHours": summary.total_hours,
        "billableRate": summary.billable_rate,
        "entryCount": summary.entry_count,
        "skippedCount": summary.skipped_count,
        "dailyBreakdown": daily_breakdown,
        "userBreakdown": {
            str(user): user_summary.to_dict() for user, user_summary in by_user.groups.items()
        },
    }


def goal_summary(
    goals: list[dict],
    entries: list[dict],
    timeframe: str,
    now: datetime,
    user_id: str | None = None,
) -> dict:
    """
    Goal completion for a dashboard view.

    Only the user's goals (and goals without an owner) are considered when
    ``user_id`` is given.

    Raises:
        UnsupportedUnit: for an unknown timeframe
    """
    unit = parse_unit(timeframe)
    _, completions = evaluate_user_goals(goals, entries, now, unit, user_id)
    counts = goal_completion_counts(completions)
    return {
        "timeframe": unit.value,
        "goals": [completion.to_dict() for completion in completions],
        "goalCompletionCounts": counts.to_dict(),
        "goalCompletionRate": counts.completion_rate,
    }


def case_breakdown(
    entries: list[dict],
    timeframe: str,
    now: datetime,
    user_id: str | None = None,
) -> dict:
    """
    Hours per case for the timeframe bucket containing ``now``.

    Entries without a caseId are left out. Each case's percentage is its
    share of the hours logged on cases; cases are sorted by total hours,
    largest first.

    Raises:
        UnsupportedUnit: for an unknown timeframe
    """
    unit = parse_unit(timeframe)
    bucket = bucket_bounds(now, unit)
    by_case = aggregate_by(entries, bucket, "caseId", user_id=user_id)

    cases = {case_id: summary for case_id, summary in by_case.groups.items() if case_id}
    billable_seconds = sum(summary.billable_seconds for summary in cases.values())
    non_billable_seconds = sum(summary.non_billable_seconds for summary in cases.values())
    total_seconds = billable_seconds + non_billable_seconds

    ranked = sorted(
        cases.items(),
        key=lambda item: item[1].billable_seconds + item[1].non_billable_seconds,
        reverse=True,
    )
    breakdown = [
        {
            "caseId": case_id,
            "caseName": f"Case {case_id}",
            "totalHours": summary.total_hours,
            "billableHours": summary.billable_hours,
            "nonBillableHours": summary.non_billable_hours,
            "entryCount": summary.entry_count,
            "percentage": percentage(
                summary.billable_seconds + summary.non_billable_seconds, total_seconds
            ),
        }
        for case_id, summary in ranked
    ]

    return {
        "timeframe": unit.value,
        "bucket": bucket.to_dict(),
        "breakdown": breakdown,
        "summary": {
            "totalHours": round_hours(total_seconds),
            "totalBillableHours": round_hours(billable_seconds),
            "totalNonBillableHours": round_hours(non_billable_seconds),
            "caseCount": len(breakdown),
            "skippedCount": by_case.skipped_count,
        },
    }
