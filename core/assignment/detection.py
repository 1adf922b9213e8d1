#!/usr/bin/env python3
"""
Complexity/Urgency Detection - Auto-classification for tasks that do not
set complexity or urgency explicitly.
"""

from datetime import datetime, timedelta
from typing import Optional

from core.enums import TaskComplexity, TaskUrgency
from core.assignment.clock import as_aware, utc_now

COMPLEX_KEYWORDS = (
    "complex",
    "advanced",
    "expert",
    "multi-page",
    "campaign",
    "series",
    "animation",
    "3d",
    "motion graphics",
)
SIMPLE_KEYWORDS = ("simple", "basic", "quick", "minor", "small", "edit")

DEFAULT_WORKING_DEADLINE_RATIO = 0.7


def _hours_points(estimated_hours: Optional[float]) -> int:
    if estimated_hours is None:
        return 0
    if estimated_hours <= 2:
        return 0
    if estimated_hours <= 4:
        return 1
    if estimated_hours <= 8:
        return 2
    return 3


def _skills_points(required_skills_count: int) -> int:
    if required_skills_count <= 1:
        return 0
    if required_skills_count <= 2:
        return 1
    if required_skills_count <= 4:
        return 2
    return 3


def detect_task_complexity(
    estimated_hours: Optional[float],
    required_skills_count: int,
    description: Optional[str]
) -> TaskComplexity:
    """Estimate complexity from effort, skill breadth and description keywords."""
    score = _hours_points(estimated_hours) + _skills_points(required_skills_count)

    text = (description or "").lower()
    if any(keyword in text for keyword in COMPLEX_KEYWORDS):
        score += 2
    if any(keyword in text for keyword in SIMPLE_KEYWORDS):
        score -= 1

    if score <= 1:
        return TaskComplexity.SIMPLE
    if score <= 3:
        return TaskComplexity.INTERMEDIATE
    if score <= 5:
        return TaskComplexity.ADVANCED
    return TaskComplexity.EXPERT


def detect_task_urgency(
    deadline: Optional[datetime],
    now: Optional[datetime] = None
) -> TaskUrgency:
    """Classify urgency from the hours left until the deadline."""
    if deadline is None:
        return TaskUrgency.FLEXIBLE

    current = as_aware(now) if now is not None else utc_now()
    hours_left = (as_aware(deadline) - current).total_seconds() / 3600

    if hours_left <= 4:
        return TaskUrgency.CRITICAL
    if hours_left <= 24:
        return TaskUrgency.URGENT
    if hours_left <= 72:
        return TaskUrgency.STANDARD
    return TaskUrgency.FLEXIBLE


def calculate_working_deadline(
    assigned_at: datetime,
    deadline: datetime,
    ratio: float = DEFAULT_WORKING_DEADLINE_RATIO
) -> datetime:
    """Soft internal deadline at ``ratio`` of the assigned -> deadline window.

    A deadline at or before the assignment time is returned unchanged.
    """
    start = as_aware(assigned_at)
    end = as_aware(deadline)
    if end <= start:
        return end
    return start + timedelta(seconds=(end - start).total_seconds() * ratio)
