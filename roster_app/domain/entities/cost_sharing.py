"""
Cost Sharing Entities - sharing edges and the per-project net cost result.

Money and percentages stay Decimal here; to_dict() is the only place
they become floats.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict

HUNDRED = Decimal("100")


@dataclass(frozen=True)
class CostSharingEdge:
    """
    Directed sharing edge: percentage of the source project's original
    cost is moved onto the destination project.
    """

    source_project_id: int
    destination_project_id: int
    percentage: Decimal

    def share_of(self, amount: Decimal) -> Decimal:
        """Portion of amount carried by this edge."""
        return amount * self.percentage / HUNDRED


@dataclass(frozen=True)
class CostSharingCalculation:
    """
    Net cost of one project for one period.

    INVARIANT: net_cost = original_cost - shared_out + shared_in
    """

    project_id: int
    project_name: str
    original_cost: Decimal
    shared_out: Decimal
    shared_in: Decimal
    net_cost: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            'project_id': self.project_id,
            'project_name': self.project_name,
            'original_cost': float(self.original_cost),
            'shared_out': float(self.shared_out),
            'shared_in': float(self.shared_in),
            'net_cost': float(self.net_cost),
        }
