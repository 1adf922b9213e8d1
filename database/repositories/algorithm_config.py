import logging
from datetime import datetime, timezone
from typing import Optional, Any, Dict
from sqlalchemy import select, update, func

from database.models import AssignmentAlgorithmConfig
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class AlgorithmConfigRepository(BaseRepository):
    def get_active(self) -> Optional[AssignmentAlgorithmConfig]:
        stmt = (
            select(AssignmentAlgorithmConfig)
            .where(AssignmentAlgorithmConfig.is_active.is_(True))
            .order_by(AssignmentAlgorithmConfig.version.desc())
            .limit(1)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def get_by_id(self, config_id: Any) -> Optional[AssignmentAlgorithmConfig]:
        stmt = select(AssignmentAlgorithmConfig).where(AssignmentAlgorithmConfig.id == config_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def get_latest_version(self) -> int:
        stmt = select(func.max(AssignmentAlgorithmConfig.version))
        return self.db.execute(stmt).scalar() or 0

    def add(
        self,
        version: int,
        name: str,
        sections: Dict[str, Any],
        description: Optional[str] = None,
        created_by: Optional[str] = None
    ) -> AssignmentAlgorithmConfig:
        row = AssignmentAlgorithmConfig(
            version=version,
            name=name,
            description=description,
            is_active=False,
            created_by=created_by,
            **sections
        )
        self.db.add(row)
        self.db.flush()  # Generate ID
        return row

    def deactivate_all(self) -> None:
        self.db.execute(
            update(AssignmentAlgorithmConfig)
            .where(AssignmentAlgorithmConfig.is_active.is_(True))
            .values(is_active=False)
        )

    def activate(self, row: AssignmentAlgorithmConfig) -> None:
        row.is_active = True
        row.published_at = datetime.now(timezone.utc)
        self.db.flush()
