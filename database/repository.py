import logging

from sqlalchemy.orm import Session

from database.repositories import (
    AlgorithmConfigRepository,
    FreelancerRepository,
    AffinityRepository,
    TaskRepository,
    OfferRepository,
)

logger = logging.getLogger(__name__)


class AssignmentRepository:
    """Persistence facade for the assignment engine.

    Groups the per-table repositories behind one Session so a single unit
    of work covers ranking, offer creation and the task state transition.
    """

    def __init__(self, db: Session):
        self.db = db
        self.configs = AlgorithmConfigRepository(db)
        self.freelancers = FreelancerRepository(db)
        self.affinities = AffinityRepository(db)
        self.tasks = TaskRepository(db)
        self.offers = OfferRepository(db)
