"""
Cost Report Service - multi-project cost breakdowns for a period.

Orchestrates CostAggregationService and CostSharingService for one or
all active projects. The first failure aborts a batch; partial results
are never returned.
"""
import logging
from typing import Dict, List, Optional

from roster_app.domain.entities import CostSharingCalculation
from roster_app.domain.exceptions import ProjectNotFoundError
from roster_app.domain.store import CostDataStore
from .cost_aggregation_service import CostAggregationService, ZERO
from .cost_sharing_service import CostSharingService
from .shift_classifier import ShiftClassifier

logger = logging.getLogger(__name__)


class CostReportService:
    """Service assembling per-project net costs for a period."""

    def __init__(self, store: CostDataStore, classifier: Optional[ShiftClassifier] = None):
        self.store = store
        self.aggregator = CostAggregationService(store, classifier)
        self.sharing = CostSharingService(store, self.aggregator)

    def get_project_cost_breakdown(self, project_id: int, year: int, month: int) -> CostSharingCalculation:
        """
        Net cost of one project for a period.

        Raises:
            ProjectNotFoundError: If the project does not exist
        """
        if self.store.find_project_by_id(project_id) is None:
            raise ProjectNotFoundError(project_id)
        original_cost = self.aggregator.project_original_cost(project_id, year, month)
        return self.sharing.compute_net_cost(project_id, year, month, original_cost)

    def get_all_projects_cost_breakdown(self, year: int, month: int) -> List[CostSharingCalculation]:
        """
        Net cost of every active project, in store order.

        Callers needing a canonical order must sort the result themselves.
        Any error (including StoreUnavailableError) propagates and aborts
        the whole batch.
        """
        projects = self.store.find_active_projects()
        logger.info(f"Computing cost breakdown for {len(projects)} project(s), {year}-{month:02d}")

        results = []
        for project in projects:
            original_cost = self.aggregator.project_original_cost(project.id, year, month)
            results.append(
                self.sharing.compute_net_cost(project.id, year, month, original_cost)
            )
        return results

    # Aliases matching the engine's operation names
    all_projects_cost = get_all_projects_cost_breakdown

    def financial_overview(self, year: int, month: int) -> Dict:
        """
        Summary of every active project with grand totals.

        Returns:
            Dict with per-project rows (staff count, original and net cost)
            and grand totals of both
        """
        rows = []
        total_original = ZERO
        total_net = ZERO
        for calc in self.get_all_projects_cost_breakdown(year, month):
            staff_count = len([
                s for s in self.store.find_staff_by_project(calc.project_id) if s.is_active
            ])
            rows.append({
                'project_id': calc.project_id,
                'project_name': calc.project_name,
                'staff_count': staff_count,
                'original_cost': calc.original_cost,
                'net_cost': calc.net_cost,
            })
            total_original += calc.original_cost
            total_net += calc.net_cost

        return {
            'year': year,
            'month': month,
            'projects': rows,
            'project_count': len(rows),
            'grand_total_original': total_original,
            'grand_total_net': total_net,
        }
