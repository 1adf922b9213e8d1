"""
Closed vocabularies shared by the config layer, the scoring engine and the
persistence layer.

All enums subclass ``str`` so they compare equal to the raw values stored in
text columns (``OfferResponse.ACCEPTED == "ACCEPTED"``).
"""

from enum import Enum


class ExperienceLevel(str, Enum):
    JUNIOR = "JUNIOR"
    MID = "MID"
    SENIOR = "SENIOR"
    EXPERT = "EXPERT"


class TaskComplexity(str, Enum):
    SIMPLE = "SIMPLE"
    INTERMEDIATE = "INTERMEDIATE"
    ADVANCED = "ADVANCED"
    EXPERT = "EXPERT"


class TaskUrgency(str, Enum):
    CRITICAL = "CRITICAL"
    URGENT = "URGENT"
    STANDARD = "STANDARD"
    FLEXIBLE = "FLEXIBLE"

    @property
    def is_rush(self) -> bool:
        """CRITICAL and URGENT tasks are subject to the rush-only exclusion rules."""
        return self in (TaskUrgency.CRITICAL, TaskUrgency.URGENT)


class OfferResponse(str, Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    EXPIRED = "EXPIRED"

    @property
    def is_terminal(self) -> bool:
        return self is not OfferResponse.PENDING


class TaskStatus(str, Enum):
    PENDING = "PENDING"
    OFFERED = "OFFERED"
    ASSIGNED = "ASSIGNED"
    IN_PROGRESS = "IN_PROGRESS"
    IN_REVIEW = "IN_REVIEW"
    REVISION_REQUESTED = "REVISION_REQUESTED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    UNASSIGNABLE = "UNASSIGNABLE"


# Statuses that no longer count towards an artist's active workload
TERMINAL_TASK_STATUSES = (TaskStatus.COMPLETED, TaskStatus.CANCELLED)
