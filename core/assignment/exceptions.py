"""Errors raised by the assignment core.

Pure scoring never raises for bad artist data; these cover persistence-backed
operations where the caller asked for something that does not exist or is in
the wrong state.
"""


class AssignmentError(Exception):
    """Base class for assignment errors."""


class TaskNotFoundError(AssignmentError):
    def __init__(self, task_id):
        super().__init__(f"Task {task_id} not found")
        self.task_id = task_id


class OfferNotFoundError(AssignmentError):
    pass


class OfferStateError(AssignmentError):
    """An offer was asked to change after it had already left PENDING."""


class ConfigNotFoundError(AssignmentError):
    def __init__(self, config_id):
        super().__init__(f"Algorithm config {config_id} not found")
        self.config_id = config_id


class InvalidConfigError(AssignmentError):
    pass
