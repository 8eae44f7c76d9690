"""Business settings domain service."""

from dataclasses import replace
from decimal import Decimal
from typing import Optional

import structlog

from shopledger.database.store import DocumentStore
from shopledger.domain.entities import BusinessSettings, Outcome
from shopledger.domain.errors import save_failed

logger = structlog.get_logger(__name__)


class SettingsService:
    """Service for reading and editing the business settings."""

    def __init__(self, store: DocumentStore):
        """Initialize settings service.

        Args:
            store: Document store instance
        """
        self.store = store

    def get_settings(self) -> BusinessSettings:
        return self.store.load().settings

    def is_initialized(self) -> bool:
        """Return True once a business name has been set."""
        return bool(self.get_settings().name)

    def update_settings(
        self,
        name: Optional[str] = None,
        daily_target: Optional[Decimal] = None,
        clear_target: bool = False,
    ) -> Outcome:
        """Update the business name and/or daily profit target.

        Args:
            name: Optional new business name
            daily_target: Optional new daily profit target
            clear_target: If True, remove the daily target (daily_target must be None)

        Returns:
            Outcome carrying the new BusinessSettings on success
        """
        if clear_target and daily_target is not None:
            return Outcome.failure("Cannot set both daily_target and clear_target")
        if name is not None and not name.strip():
            return Outcome.failure("Business name is required")
        if daily_target is not None and daily_target < 0:
            return Outcome.failure("Daily target must be non-negative")

        data = self.store.load()
        settings = data.settings
        if name is not None:
            settings = replace(settings, name=name.strip())
        if clear_target:
            settings = replace(settings, daily_target=None)
        elif daily_target is not None:
            settings = replace(settings, daily_target=daily_target)

        if not self.store.save(replace(data, settings=settings)):
            return Outcome.failure(save_failed())
        logger.info("settings.updated", name=settings.name)
        return Outcome.success(settings)
