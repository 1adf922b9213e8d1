import contextlib
import logging

from database.database import SessionLocal
from database.repository import AssignmentRepository

logger = logging.getLogger(__name__)


@contextlib.contextmanager
def assignment_uow():
    """Per-unit-of-work transaction scope.

    Yields an AssignmentRepository bound to a fresh Session. Commits on
    success, rolls back on exception, always closes.

    Usage:
        with assignment_uow() as repo:
            services = context.services(repo)
            services.offers.create_task_offer(task_id, best)
        # commit happens automatically on successful exit
    """
    session = SessionLocal()
    try:
        repo = AssignmentRepository(session)
        yield repo
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
