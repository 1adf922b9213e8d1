from database.repositories.base import BaseRepository
from database.repositories.algorithm_config import AlgorithmConfigRepository
from database.repositories.freelancer import FreelancerRepository, AffinityRepository
from database.repositories.task import TaskRepository
from database.repositories.offer import OfferRepository

__all__ = [
    'BaseRepository',
    'AlgorithmConfigRepository',
    'FreelancerRepository',
    'AffinityRepository',
    'TaskRepository',
    'OfferRepository',
]
