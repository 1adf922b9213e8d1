#!/usr/bin/env python3
"""
Assignment Module - Artist matching, offers and escalation.

Public API:
- calculate_match_score: Composite artist/task score
- ArtistRankingService: Ranks eligible artists for a task
- OfferLifecycleManager: Creates, resolves and expires offers
- EscalationCoordinator: Next step after a decline or expiry
- MetricsUpdater: Recomputes artist performance figures
- AlgorithmConfigProvider: Active config loading and versioning

Modules:
- models.py: Data structures (ArtistData, TaskData, ArtistScore)
- clock.py: Local time-of-day helpers
- scoring.py: Sub-scores and composite scoring
- exclusions.py: Hard exclusion rules
- detection.py: Complexity/urgency auto-detection
- ranking.py, offers.py, escalation.py, metrics.py: Services
- config_provider.py: Stored config loading, drafts and publishing
"""

from core.assignment.models import ArtistData, TaskData, ArtistScore, ScoreBreakdown
from core.assignment.scoring import calculate_match_score
from core.assignment.config_provider import AlgorithmConfigProvider
from core.assignment.ranking import ArtistRankingService
from core.assignment.offers import OfferLifecycleManager, calculate_offer_expiration
from core.assignment.escalation import EscalationCoordinator, EscalationAction, EscalationOutcome
from core.assignment.metrics import MetricsUpdater, compute_artist_metrics

__all__ = [
    'ArtistData',
    'TaskData',
    'ArtistScore',
    'ScoreBreakdown',
    'calculate_match_score',
    'AlgorithmConfigProvider',
    'ArtistRankingService',
    'OfferLifecycleManager',
    'calculate_offer_expiration',
    'EscalationCoordinator',
    'EscalationAction',
    'EscalationOutcome',
    'MetricsUpdater',
    'compute_artist_metrics',
]
