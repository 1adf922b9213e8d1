#!/usr/bin/env python3
"""
Exclusion Rules - Hard cutoffs that remove an artist from the ranking.

Rules are evaluated in a fixed priority order and the first match wins:
1. Vacation mode (if the rule is enabled)
2. Skill score below the configured minimum
3. Workload at or above the maximum (if the rule is enabled)
4. Night hours for CRITICAL/URGENT tasks (if the rule is enabled)
5. Artist opted out of CRITICAL/URGENT tasks
"""

from datetime import datetime
from typing import Optional
import logging

from core.config_loader import AlgorithmConfig
from core.enums import TaskUrgency
from core.assignment.clock import is_night_hours
from core.assignment.models import ArtistData, TaskData

logger = logging.getLogger(__name__)

REASON_VACATION = "Artist is on vacation"
REASON_NIGHT_HOURS = "Urgent task during night hours"
REASON_NO_URGENT = "Artist does not accept urgent tasks"


def _format_score(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def find_exclusion_reason(
    artist: ArtistData,
    task: TaskData,
    skill_score: float,
    active_tasks: int,
    config: AlgorithmConfig,
    now: Optional[datetime] = None
) -> Optional[str]:
    """Return the reason the artist is excluded from this task, or None if eligible."""
    rules = config.exclusion_rules
    is_rush = TaskUrgency(task.urgency).is_rush

    if rules.exclude_vacation_mode and artist.vacation_mode:
        return REASON_VACATION

    if skill_score < rules.min_skill_score_to_include:
        return (
            f"Skill score ({_format_score(skill_score)}) below threshold "
            f"({_format_score(rules.min_skill_score_to_include)})"
        )

    max_active = config.workload_settings.max_active_tasks
    if rules.exclude_overloaded and active_tasks >= max_active:
        return f"At max capacity ({active_tasks}/{max_active} tasks)"

    if rules.exclude_night_hours_for_urgent and is_rush and is_night_hours(artist.timezone, now):
        return REASON_NIGHT_HOURS

    if is_rush and not artist.accepts_urgent_tasks:
        return REASON_NO_URGENT

    return None
