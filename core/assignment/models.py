#!/usr/bin/env python3
"""
Assignment Models - Data structures for artist matching.

ArtistData and TaskData are read-only snapshots taken from persistence for
one scoring pass. ArtistScore is ephemeral and never stored; the breakdown
is copied into the offer row when an artist is offered a task.
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import List, Optional, Dict, Any

from core.enums import ExperienceLevel, TaskComplexity, TaskUrgency, TaskStatus

# Sentinel total score for excluded candidates
EXCLUDED_SCORE = -1.0


@dataclass(frozen=True)
class ArtistData:
    """Snapshot of one freelancer eligible for matching."""
    user_id: str
    name: str = ""
    email: str = ""
    timezone: Optional[str] = None
    experience_level: ExperienceLevel = ExperienceLevel.JUNIOR
    rating: float = 0.0
    completed_tasks: int = 0
    acceptance_rate: Optional[float] = None  # percent, None = unknown
    on_time_rate: Optional[float] = None  # percent, None = unknown
    max_concurrent_tasks: int = 3
    working_hours_start: str = "09:00"
    working_hours_end: str = "18:00"
    accepts_urgent_tasks: bool = True
    vacation_mode: bool = False
    skills: List[str] = field(default_factory=list)
    specializations: List[str] = field(default_factory=list)
    preferred_categories: List[str] = field(default_factory=list)

    @property
    def all_skills(self) -> List[str]:
        return [*self.skills, *self.specializations]


@dataclass(frozen=True)
class TaskData:
    """A task awaiting assignment."""
    id: str
    client_id: str
    title: str = ""
    complexity: TaskComplexity = TaskComplexity.INTERMEDIATE
    urgency: TaskUrgency = TaskUrgency.STANDARD
    category_slug: Optional[str] = None
    required_skills: List[str] = field(default_factory=list)
    deadline: Optional[datetime] = None
    status: TaskStatus = TaskStatus.PENDING
    escalation_level: int = 1


@dataclass(frozen=True)
class ScoreBreakdown:
    skill_score: float
    timezone_score: float
    experience_score: float
    workload_score: float
    performance_score: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ArtistScore:
    """Result of scoring one artist against one task."""
    artist: ArtistData
    total_score: float
    breakdown: ScoreBreakdown
    excluded: bool = False
    exclusion_reason: Optional[str] = None
