"""
Saved calculations: a most-recent-N list kept in the database.

Saving an id that already exists replaces it. When the list grows past the
limit the oldest rows are evicted.
"""

import logging
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy.orm import Session

from . import models
from .config import settings
from .schemas import CalculationResult

logger = logging.getLogger(__name__)


class SavedCalculationStore:

    def __init__(self, db: Session, limit: int = None):
        self.db = db
        self.limit = settings.MAX_SAVED_CALCULATIONS if limit is None else limit

    def save(self, result: CalculationResult, name: str = None) -> models.SavedCalculation:
        existing = self.get(result.id)
        if existing:
            self.db.delete(existing)
            self.db.flush()

        # created_at orders the list, so keep it strictly increasing
        created_at = datetime.utcnow()
        newest = self.latest()
        if newest and newest.created_at >= created_at:
            created_at = newest.created_at + timedelta(microseconds=1)

        row = models.SavedCalculation(
            id=result.id,
            name=name or result.inputs.project_name,
            created_at=created_at,
            inputs_json=result.inputs.model_dump(mode="json"),
            results_json=result.model_dump(mode="json"),
        )
        self.db.add(row)
        self.db.flush()
        self._evict()
        self.db.commit()
        self.db.refresh(row)
        logger.info("Saved calculation %s (%s)", row.id, row.name)
        return row

    def _evict(self):
        stale = (
            self.db.query(models.SavedCalculation)
            .order_by(models.SavedCalculation.created_at.desc())
            .offset(self.limit)
            .all()
        )
        for row in stale:
            logger.info("Evicting saved calculation %s", row.id)
            self.db.delete(row)

    def list(self) -> List[models.SavedCalculation]:
        """Newest first."""
        return (
            self.db.query(models.SavedCalculation)
            .order_by(models.SavedCalculation.created_at.desc())
            .all()
        )

    def get(self, calculation_id: str) -> Optional[models.SavedCalculation]:
        return (
            self.db.query(models.SavedCalculation)
            .filter(models.SavedCalculation.id == calculation_id)
            .first()
        )

    def latest(self) -> Optional[models.SavedCalculation]:
        return (
            self.db.query(models.SavedCalculation)
            .order_by(models.SavedCalculation.created_at.desc())
            .first()
        )

    def delete(self, calculation_id: str) -> bool:
        row = self.get(calculation_id)
        if not row:
            return False
        self.db.delete(row)
        self.db.commit()
        return True

    def clear(self) -> int:
        count = self.db.query(models.SavedCalculation).delete()
        self.db.commit()
        return count

    @staticmethod
    def load_result(row: models.SavedCalculation) -> CalculationResult:
        """Rehydrate the stored result."""
        return CalculationResult.model_validate(row.results_json)
