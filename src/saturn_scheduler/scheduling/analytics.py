"""Schedule analytics and recommendations, computed from the assignment itself."""

from __future__ import annotations

from collections import Counter, defaultdict

from saturn_scheduler.models import (
    Interviewer,
    InterviewerWorkload,
    ScheduleAnalytics,
    ScheduledInterview,
)
from saturn_scheduler.scheduling.slots import parse_preferred_date
from saturn_scheduler.scheduling.validator import count_conflicts

HIGH_UTILIZATION = 0.8


def compute_analytics(
    entries: list[ScheduledInterview],
    interviewers: list[Interviewer] | tuple[Interviewer, ...],
    daily_capacity: int,
) -> ScheduleAnalytics:
    per_interviewer: dict[str, list[ScheduledInterview]] = defaultdict(list)
    for e in entries:
        per_interviewer[e.interviewer.id].append(e)

    workload: dict[str, InterviewerWorkload] = {}
    for interviewer in interviewers:
        booked = per_interviewer.get(interviewer.id, [])
        days = {e.date for e in booked}
        total = len(booked)
        workload[interviewer.id] = InterviewerWorkload(
            name=interviewer.name,
            total_interviews=total,
            average_per_day=round(total / len(days), 2) if days else 0.0,
            utilization_rate=round(total / (len(days) * daily_capacity), 2) if days and daily_capacity else 0.0,
        )

    preferred = [(e, parse_preferred_date(e.candidate.preferred_date)) for e in entries]
    preferred = [(e, d) for e, d in preferred if d is not None]
    honoured = sum(1 for e, d in preferred if e.date == d.isoformat())
    efficiency = round(honoured / len(preferred), 2) if preferred else 1.0

    mean_score = sum(e.matching_score for e in entries) / len(entries) if entries else 0.0

    return ScheduleAnalytics(
        interviewer_workload=workload,
        schedule_efficiency=efficiency,
        conflict_count=count_conflicts(entries),
        optimization_score=round(mean_score * 100, 1),
    )


def recommendations(entries: list[ScheduledInterview], analytics: ScheduleAnalytics) -> list[str]:
    recs: list[str] = []

    busy = [w.name for w in analytics.interviewer_workload.values() if w.utilization_rate >= HIGH_UTILIZATION]
    if busy:
        recs.append(
            f"{', '.join(busy)} {'is' if len(busy) == 1 else 'are'} near daily capacity; "
            "consider adding breaks between consecutive interviews"
        )

    idle = [w.name for w in analytics.interviewer_workload.values() if w.total_interviews == 0]
    if idle:
        recs.append(f"{', '.join(idle)} received no interviews; their specialization did not match this batch")

    gaps = Counter(g for e in entries for g in e.skill_gaps)
    if gaps:
        skill, count = gaps.most_common(1)[0]
        if count > 1:
            recs.append(f"{count} candidates lack {skill}; plan a focused assessment for it")

    if analytics.schedule_efficiency < 1.0:
        recs.append(
            f"Only {round(analytics.schedule_efficiency * 100)}% of preferred dates could be honoured; "
            "confirm the moved interviews with candidates"
        )

    if analytics.conflict_count == 0 and entries:
        recs.append(f"All {len(entries)} candidates scheduled with no interviewer conflicts")
    return recs
