"""
Cost Aggregation Service - folds a month of roster entries into labor cost.

Implements the aggregation rules:
- One daily wage per entry whose shift code is a working shift
- Per-staff accumulation, then a per-project sum
- Missing roster means zero cost, not an error
"""
import logging
from decimal import Decimal
from typing import Dict, Optional

from roster_app.config import get_config
from roster_app.domain.store import CostDataStore
from .shift_classifier import ShiftClassifier

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


class CostAggregationService:
    """
    Service computing a project's original (pre-sharing) labor cost.

    Ensures:
    - StaffCost(s) = Σ(wage_per_day | entry.staff = s, entry.shift is working)
    - OriginalCost(p) = Σ(StaffCost(s) | s rostered on p)
    """

    def __init__(self, store: CostDataStore, classifier: Optional[ShiftClassifier] = None):
        self.store = store
        self._classifier = classifier

    @property
    def classifier(self) -> ShiftClassifier:
        """Classifier from stored shift types, resolved once per service instance."""
        if self._classifier is None:
            self._classifier = ShiftClassifier.from_shift_types(
                self.store.find_shift_types(),
                fallback_codes=get_config().fallback_work_codes,
            )
        return self._classifier

    def staff_costs(self, project_id: int, year: int, month: int) -> Dict[int, Decimal]:
        """
        Accumulate wages per staff member for a period.

        Args:
            project_id: Project identifier
            year: Roster year
            month: Roster month (1-12)

        Returns:
            Mapping staff_id -> accumulated cost; empty when no roster exists
        """
        roster = self.store.find_roster(project_id, year, month)
        if roster is None:
            return {}

        costs: Dict[int, Decimal] = {}
        for entry in roster.entries:
            if not self.classifier.is_working_shift(entry.shift_code):
                continue
            costs[entry.staff_id] = costs.get(entry.staff_id, ZERO) + entry.wage_per_day
        return costs

    def project_original_cost(self, project_id: int, year: int, month: int) -> Decimal:
        """
        Original cost of a project for a period, before any sharing.

        Args:
            project_id: Project identifier
            year: Roster year
            month: Roster month (1-12)

        Returns:
            Total labor cost; Decimal 0 when the roster does not exist
        """
        total = sum(self.staff_costs(project_id, year, month).values(), ZERO)
        logger.debug(f"Original cost for project {project_id} {year}-{month:02d}: {total}")
        return total
