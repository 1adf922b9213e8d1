from .base import Base
from .user import User
from .freelancer import FreelancerProfile, ClientArtistAffinity
from .task import TaskCategory, Task, TaskOffer
from .algorithm_config import AssignmentAlgorithmConfig

__all__ = [
    'Base',
    'User',
    'FreelancerProfile',
    'ClientArtistAffinity',
    'TaskCategory',
    'Task',
    'TaskOffer',
    'AssignmentAlgorithmConfig',
]
