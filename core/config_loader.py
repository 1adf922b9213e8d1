import copy
import yaml
import os
from typing import Optional, Dict, Any
from pydantic import BaseModel, ConfigDict, Field

from core.enums import ExperienceLevel, TaskComplexity, TaskUrgency


class _FrozenModel(BaseModel):
    """Algorithm config sections are immutable values; derive new ones with model_copy."""
    model_config = ConfigDict(frozen=True, extra='ignore')


class ScoreWeights(_FrozenModel):
    """Percentage weight of each sub-score in the composite (conceptually sums to 100)."""
    skill_match: float = 35
    timezone_fit: float = 20
    experience_match: float = 20
    workload_balance: float = 15
    performance_history: float = 10

    def total(self) -> float:
        return (
            self.skill_match
            + self.timezone_fit
            + self.experience_match
            + self.workload_balance
            + self.performance_history
        )


class AcceptanceWindows(_FrozenModel):
    """Minutes an artist has to accept an offer, per urgency tier."""
    critical: int = 10
    urgent: int = 30
    standard: int = 120
    flexible: int = 240

    def minutes_for(self, urgency: TaskUrgency) -> int:
        return {
            TaskUrgency.CRITICAL: self.critical,
            TaskUrgency.URGENT: self.urgent,
            TaskUrgency.STANDARD: self.standard,
            TaskUrgency.FLEXIBLE: self.flexible,
        }[TaskUrgency(urgency)]


class EscalationSettings(_FrozenModel):
    level1_skill_threshold: float = 70
    level2_skill_threshold: float = 50
    level1_max_offers: int = 3
    level2_max_offers: int = 3
    level3_broadcast_minutes: int = 30  # consumed by the broadcast process, not by ranking
    max_workload_override: int = 1


class TimezoneSettings(_FrozenModel):
    """Time-of-day curve applied to the artist's local clock."""
    peak_hours_start: str = "09:00"
    peak_hours_end: str = "18:00"
    peak_score: float = 100
    evening_score: float = 80
    early_morning_score: float = 70
    late_evening_score: float = 50
    night_score: float = 20


class ExperienceRow(_FrozenModel):
    junior: float
    mid: float
    senior: float
    expert: float

    def score_for(self, level: ExperienceLevel) -> float:
        return {
            ExperienceLevel.JUNIOR: self.junior,
            ExperienceLevel.MID: self.mid,
            ExperienceLevel.SENIOR: self.senior,
            ExperienceLevel.EXPERT: self.expert,
        }[ExperienceLevel(level)]


class ExperienceMatrix(_FrozenModel):
    """Task complexity x artist experience level -> match score (0-100)."""
    simple: ExperienceRow = ExperienceRow(junior=100, mid=90, senior=70, expert=50)
    intermediate: ExperienceRow = ExperienceRow(junior=60, mid=100, senior=90, expert=80)
    advanced: ExperienceRow = ExperienceRow(junior=20, mid=70, senior=100, expert=95)
    expert: ExperienceRow = ExperienceRow(junior=0, mid=40, senior=80, expert=100)

    def row_for(self, complexity: TaskComplexity) -> ExperienceRow:
        return {
            TaskComplexity.SIMPLE: self.simple,
            TaskComplexity.INTERMEDIATE: self.intermediate,
            TaskComplexity.ADVANCED: self.advanced,
            TaskComplexity.EXPERT: self.expert,
        }[TaskComplexity(complexity)]


class WorkloadSettings(_FrozenModel):
    max_active_tasks: int = 5
    score_per_task: float = 20


class ExclusionRules(_FrozenModel):
    """Hard cutoffs; an excluded artist is never ranked."""
    min_skill_score_to_include: float = 50
    exclude_overloaded: bool = True
    exclude_night_hours_for_urgent: bool = True
    exclude_vacation_mode: bool = True


class BonusModifiers(_FrozenModel):
    """Flat points added to the weighted composite."""
    category_specialization_bonus: float = 10
    nice_to_have_skill_bonus: float = 5  # stored with the config, not applied by scoring
    favorite_artist_bonus: float = 10


class AlgorithmConfig(_FrozenModel):
    """
    Complete weighting/threshold configuration for artist matching.

    Immutable: escalation and stored overrides produce new instances,
    the built-in DEFAULT_CONFIG is never modified.
    """
    weights: ScoreWeights = Field(default_factory=ScoreWeights)
    acceptance_windows: AcceptanceWindows = Field(default_factory=AcceptanceWindows)
    escalation_settings: EscalationSettings = Field(default_factory=EscalationSettings)
    timezone_settings: TimezoneSettings = Field(default_factory=TimezoneSettings)
    experience_matrix: ExperienceMatrix = Field(default_factory=ExperienceMatrix)
    workload_settings: WorkloadSettings = Field(default_factory=WorkloadSettings)
    exclusion_rules: ExclusionRules = Field(default_factory=ExclusionRules)
    bonus_modifiers: BonusModifiers = Field(default_factory=BonusModifiers)

    def for_escalation_level(self, escalation_level: int) -> "AlgorithmConfig":
        """Return the config with thresholds relaxed for the given escalation level.

        Level 1 uses the config as-is. From level 2 on the minimum skill score
        drops to the level-2 threshold and the workload cap is raised by the
        configured override, widening the candidate pool.
        """
        if escalation_level < 2:
            return self

        escalation = self.escalation_settings
        return self.model_copy(update={
            'exclusion_rules': self.exclusion_rules.model_copy(update={
                'min_skill_score_to_include': escalation.level2_skill_threshold,
            }),
            'workload_settings': self.workload_settings.model_copy(update={
                'max_active_tasks': self.workload_settings.max_active_tasks + escalation.max_workload_override,
            }),
        })


CONFIG_SECTIONS = tuple(AlgorithmConfig.model_fields.keys())

DEFAULT_CONFIG = AlgorithmConfig()


def _deep_merge(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        elif value is not None:
            merged[key] = value
    return merged


def merge_algorithm_config(
    overrides: Optional[Dict[str, Any]],
    base: AlgorithmConfig = DEFAULT_CONFIG
) -> AlgorithmConfig:
    """Overlay a (possibly partial) nested dict onto a base config.

    Missing sections and keys keep the base values. Raises pydantic
    ValidationError if an override has the wrong shape.
    """
    if not overrides:
        return base
    return AlgorithmConfig.model_validate(_deep_merge(base.model_dump(), overrides))


class DatabaseConfig(BaseModel):
    url: str


class AssignmentSettings(BaseModel):
    """Operational settings around the matching engine."""
    # Urgency assumed when a task row has none stored
    fallback_urgency: TaskUrgency = TaskUrgency.STANDARD

    # Soft internal deadline as a fraction of the assigned -> deadline window
    working_deadline_ratio: float = Field(default=0.7, gt=0.0, le=1.0)

    # Partial AlgorithmConfig overrides used when no stored config is active.
    # Example:
    #   algorithm:
    #     weights: {skill_match: 40, timezone_fit: 15}
    algorithm: Optional[Dict[str, Any]] = None

    def fallback_algorithm_config(self) -> AlgorithmConfig:
        return merge_algorithm_config(self.algorithm)


class AppConfig(BaseModel):
    database: DatabaseConfig
    assignment: AssignmentSettings = Field(default_factory=AssignmentSettings)


def load_config(config_path: str = "config.yaml") -> AppConfig:
    # If not found at relative path (e.g. running from root), try the project root
    if not os.path.exists(config_path):
        base_dir = os.path.dirname(os.path.abspath(__file__))
        config_path = os.path.join(base_dir, "..", "config.yaml")

    with open(config_path, "r") as f:
        data = yaml.safe_load(f) or {}

    # Allow env var override for DB URL
    env_db_url = os.environ.get("DATABASE_URL")
    if env_db_url:
        if 'database' not in data or data['database'] is None:
            data['database'] = {}
        data['database']['url'] = env_db_url

    return AppConfig(**data)
