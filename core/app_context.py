from dataclasses import dataclass

from core.config_loader import AppConfig
from core.assignment.config_provider import AlgorithmConfigProvider
from core.assignment.ranking import ArtistRankingService
from core.assignment.offers import OfferLifecycleManager
from core.assignment.escalation import EscalationCoordinator
from core.assignment.metrics import MetricsUpdater


@dataclass
class AssignmentServices:
    """Services bound to one repository (one unit of work)."""
    config_provider: AlgorithmConfigProvider
    ranking: ArtistRankingService
    offers: OfferLifecycleManager
    escalation: EscalationCoordinator
    metrics: MetricsUpdater


@dataclass
class AppContext:
    """Application context container.

    Holds the loaded configuration and wires services per unit of work.
    DB access should be obtained via assignment_uow() and passed to
    services(), so no service outlives its session.
    """
    config: AppConfig

    def services(self, repo) -> AssignmentServices:
        """Wire the assignment services around a repository.

        Args:
            repo: AssignmentRepository (or a compatible fake in tests)

        Returns:
            AssignmentServices sharing one config provider
        """
        settings = self.config.assignment
        config_provider = AlgorithmConfigProvider(repo, fallback=settings.fallback_algorithm_config())
        ranking = ArtistRankingService(repo, config_provider)
        offers = OfferLifecycleManager(repo, config_provider, fallback_urgency=settings.fallback_urgency)
        escalation = EscalationCoordinator(repo, config_provider, ranking, offers)

        return AssignmentServices(
            config_provider=config_provider,
            ranking=ranking,
            offers=offers,
            escalation=escalation,
            metrics=MetricsUpdater(repo),
        )
