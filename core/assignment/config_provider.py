#!/usr/bin/env python3
"""
Config Provider - Supplies the active AlgorithmConfig.

Stored configs are versioned rows; at most one is active. The active row is
merged section by section over the fallback config, so a row written before
a new setting existed still loads. No active row, or a malformed one, means
the fallback (DEFAULT_CONFIG unless overridden in config.yaml) is used.
"""

from typing import Optional, Dict, Any
import logging

from pydantic import ValidationError

from core.config_loader import (
    AlgorithmConfig, DEFAULT_CONFIG, CONFIG_SECTIONS, merge_algorithm_config
)
from core.assignment.exceptions import ConfigNotFoundError, InvalidConfigError

logger = logging.getLogger(__name__)

WEIGHT_SUM = 100.0
WEIGHT_SUM_TOLERANCE = 0.01


def row_to_sections(row: Any) -> Dict[str, Any]:
    """Extract the JSON section columns of a stored config row."""
    return {
        section: getattr(row, section, None)
        for section in CONFIG_SECTIONS
        if getattr(row, section, None) is not None
    }


def validate_weights(config: AlgorithmConfig) -> None:
    total = config.weights.total()
    if abs(total - WEIGHT_SUM) > WEIGHT_SUM_TOLERANCE:
        raise InvalidConfigError(f"Weights must sum to 100 (currently {total:g})")


class AlgorithmConfigProvider:
    """Loads and manages algorithm configurations through the repository.

    Built per unit of work at the composition root; never cached at module
    level, so every ranking pass sees the currently published config.
    """

    def __init__(self, repo, fallback: AlgorithmConfig = DEFAULT_CONFIG):
        self.repo = repo
        self.fallback = fallback

    def get_active_config(self) -> AlgorithmConfig:
        row = self.repo.configs.get_active()
        if row is None:
            logger.debug("No active algorithm config stored, using built-in defaults")
            return self.fallback

        try:
            return merge_algorithm_config(row_to_sections(row), base=self.fallback)
        except ValidationError as e:
            logger.error(f"Active algorithm config v{row.version} is malformed, using defaults: {e}")
            return self.fallback

    def create_draft(
        self,
        sections: Optional[Dict[str, Any]] = None,
        name: Optional[str] = None,
        description: Optional[str] = None,
        created_by: Optional[str] = None
    ) -> Any:
        """Store a new inactive config version.

        Sections not provided are filled from DEFAULT_CONFIG. Raises
        InvalidConfigError if the result is malformed or the weights do not
        sum to 100.
        """
        try:
            config = merge_algorithm_config(sections or {})
        except ValidationError as e:
            raise InvalidConfigError(str(e)) from e
        validate_weights(config)

        version = self.repo.configs.get_latest_version() + 1
        row = self.repo.configs.add(
            version=version,
            name=name or f"Configuration v{version}",
            sections=config.model_dump(),
            description=description,
            created_by=created_by,
        )
        logger.info(f"Created algorithm config draft v{version} ({row.id})")
        return row

    def publish(self, config_id: Any) -> AlgorithmConfig:
        """Make one stored config the only active one."""
        row = self.repo.configs.get_by_id(config_id)
        if row is None:
            raise ConfigNotFoundError(config_id)

        try:
            config = merge_algorithm_config(row_to_sections(row))
        except ValidationError as e:
            raise InvalidConfigError(str(e)) from e
        validate_weights(config)

        self.repo.configs.deactivate_all()
        self.repo.configs.activate(row)
        logger.info(f"Published algorithm config v{row.version} ({row.id})")
        return config
