"""
Base catalog service with shared functionality.

Every catalog service receives its SQLAlchemy session through the
constructor and shares the configured settings.
"""
from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from app.core.config import BaseAppSettings, settings

logger = logging.getLogger(__name__)


class BaseCatalogService:
    """
    Base service class for catalog operations.

    Subclasses use the protected `_db` session for store access; no state is
    kept between calls other than the session itself.
    """

    def __init__(self, db: Session, config: BaseAppSettings | None = None):
        """
        Initialize the base catalog service.

        Args:
            db: SQLAlchemy database session
            config: Settings override (defaults to the process settings)
        """
        self._db = db
        self._settings = config or settings

    @property
    def db(self) -> Session:
        """Database session accessor."""
        return self._db
