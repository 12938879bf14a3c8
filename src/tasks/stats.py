"""Point-in-time task statistics.

Everything here is derived from the store on each request. ``timeLapsed`` and
``balanceTime`` depend on ``now`` and are never stable, so nothing is cached.
All durations use a fixed 3,600,000 ms hour with no calendar arithmetic.
"""

from collections.abc import Iterable
from datetime import datetime, timedelta

from src.tasks.schemas import (
    PriorityStats,
    StatusStats,
    TaskInterval,
    TaskStats,
    TaskStatusStats,
)

MS_PER_HOUR = 3_600_000


def to_hours(delta: timedelta) -> float:
    return (delta / timedelta(milliseconds=1)) / MS_PER_HOUR


def percentage(count: int, total: int) -> float:
    if total == 0:
        return 0
    return count / total * 100


def time_lapsed(interval: TaskInterval, now: datetime) -> float:
    if interval.start_time < now:
        return to_hours(now - interval.start_time)
    return 0


def balance_time(interval: TaskInterval, now: datetime) -> float:
    if interval.end_time > now:
        return to_hours(interval.end_time - now)
    return 0


def pending_stats_by_priority(
    pending: Iterable[TaskInterval], now: datetime
) -> list[PriorityStats]:
    # Only priorities that actually occur get a group
    groups: dict[int, list[float]] = {}
    for interval in pending:
        sums = groups.setdefault(interval.priority, [0, 0])
        sums[0] += time_lapsed(interval, now)
        sums[1] += balance_time(interval, now)

    return [
        PriorityStats(priority=priority, time_lapsed=lapsed, balance_time=balance)
        for priority, (lapsed, balance) in sorted(groups.items())
    ]


def average_completion_time(finished: Iterable[TaskInterval]) -> float:
    durations = [to_hours(i.end_time - i.start_time) for i in finished]
    if not durations:
        return 0
    return sum(durations) / len(durations)


def build_task_stats(
    *,
    total_tasks: int,
    completed_count: int,
    pending: Iterable[TaskInterval],
    finished: Iterable[TaskInterval],
    now: datetime,
) -> TaskStats:
    pending_count = total_tasks - completed_count

    return TaskStats(
        total_tasks=total_tasks,
        task_status=TaskStatusStats(
            completed=StatusStats(
                count=completed_count,
                percentage=percentage(completed_count, total_tasks),
            ),
            pending=StatusStats(
                count=pending_count,
                percentage=percentage(pending_count, total_tasks),
            ),
        ),
        pending_tasks_by_priority=pending_stats_by_priority(pending, now),
        average_completion_time=average_completion_time(finished),
    )
