"""
Cost Sharing Service - net cost per project and sharing-graph integrity.

Implements:
- Single-hop share out / share in against pre-sharing baselines
- Two-node (reciprocal) and full-graph cycle detection
- Replace-all updates of a project's outgoing edges
"""
import logging
from collections import defaultdict
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Dict, Iterable, List, Optional, Set

from roster_app.config import get_config
from roster_app.domain.entities import CostSharingEdge, CostSharingCalculation
from roster_app.domain.exceptions import (
    ProjectNotFoundError,
    CostSharingCycleError,
    InvalidPercentageError,
    ValidationError,
)
from roster_app.domain.store import CostDataStore
from .cost_aggregation_service import CostAggregationService, ZERO

logger = logging.getLogger(__name__)

# Matches the NUMERIC(5, 2) storage of sharing percentages
PERCENTAGE_QUANTUM = Decimal("0.01")


def build_adjacency(edges: Iterable[CostSharingEdge]) -> Dict[int, List[int]]:
    """Map source project -> destination projects."""
    adjacency: Dict[int, List[int]] = defaultdict(list)
    for edge in edges:
        adjacency[edge.source_project_id].append(edge.destination_project_id)
    return adjacency


def find_path(adjacency: Dict[int, List[int]], start: int, target: int) -> Optional[List[int]]:
    """
    Depth-first search for a directed path.

    Args:
        adjacency: Graph as source -> destinations
        start: First node of the path
        target: Node to reach

    Returns:
        Nodes from start to target inclusive, or None if unreachable
    """
    stack = [(start, [start])]
    visited: Set[int] = set()
    while stack:
        node, path = stack.pop()
        if node == target:
            return path
        if node in visited:
            continue
        visited.add(node)
        for nxt in adjacency.get(node, ()):
            if nxt not in visited:
                stack.append((nxt, path + [nxt]))
    return None


def find_cycle(edges: Iterable[CostSharingEdge]) -> Optional[List[int]]:
    """
    Find any directed cycle in a set of edges.

    Iterative DFS keeping the current recursion stack; a back edge to a
    node still on the stack closes a cycle.

    Returns:
        Cycle nodes in order (first node not repeated), or None
    """
    adjacency = build_adjacency(edges)
    nodes = set(adjacency)
    for targets in adjacency.values():
        nodes.update(targets)

    done: Set[int] = set()
    for root in sorted(nodes):
        if root in done:
            continue
        on_stack: List[int] = [root]
        on_stack_set: Set[int] = {root}
        iterators = [iter(adjacency.get(root, ()))]
        while iterators:
            nxt = next(iterators[-1], None)
            if nxt is None:
                iterators.pop()
                finished = on_stack.pop()
                on_stack_set.discard(finished)
                done.add(finished)
                continue
            if nxt in on_stack_set:
                return on_stack[on_stack.index(nxt):]
            if nxt not in done:
                on_stack.append(nxt)
                on_stack_set.add(nxt)
                iterators.append(iter(adjacency.get(nxt, ())))
    return None


class CostSharingService:
    """
    Service for cost-sharing calculations and edge validation.

    Ensures:
    - NetCost(p) = Original(p) - Σ(Original(p) * out%) + Σ(Original(src) * in%)
    - Sharing is one hop only, always against the source's original cost
    - No edge is stored that closes a sharing cycle
    """

    def __init__(
        self,
        store: CostDataStore,
        aggregator: Optional[CostAggregationService] = None,
        cycle_detection: Optional[str] = None
    ):
        config = get_config()
        self.store = store
        self.aggregator = aggregator or CostAggregationService(store)
        self.cycle_detection = cycle_detection or config.cycle_detection
        self.max_percentage = Decimal(str(config.max_percentage))

    # =========================================================================
    # Net Cost
    # =========================================================================

    def compute_net_cost(
        self,
        project_id: int,
        year: int,
        month: int,
        original_cost: Decimal
    ) -> CostSharingCalculation:
        """
        Apply the project's sharing edges to its original cost.

        Args:
            project_id: Project identifier
            year: Period year
            month: Period month (1-12)
            original_cost: Pre-sharing cost of the project

        Returns:
            CostSharingCalculation for the project

        Raises:
            ProjectNotFoundError: If the project does not exist
        """
        project = self.store.find_project_by_id(project_id)
        if project is None:
            raise ProjectNotFoundError(project_id)

        shared_out = ZERO
        for edge in self.store.find_outgoing_edges(project_id):
            shared_out += edge.share_of(original_cost)

        shared_in = ZERO
        for edge in self.store.find_incoming_edges(project_id):
            source_cost = self.aggregator.project_original_cost(
                edge.source_project_id, year, month
            )
            shared_in += edge.share_of(source_cost)

        return CostSharingCalculation(
            project_id=project_id,
            project_name=project.name,
            original_cost=original_cost,
            shared_out=shared_out,
            shared_in=shared_in,
            net_cost=original_cost - shared_out + shared_in,
        )

    # =========================================================================
    # Cycle Detection
    # =========================================================================

    def would_create_cycle(self, source_id: int, destination_id: int) -> bool:
        """True iff the reverse edge destination -> source already exists."""
        return self.store.find_edge(destination_id, source_id) is not None

    def would_create_cycle_in_graph(self, source_id: int, destination_id: int) -> bool:
        """True iff destination can already reach source through stored edges."""
        return self._cycle_path(self.store.find_all_edges(), source_id, destination_id) is not None

    def _cycle_path(
        self,
        edges: Iterable[CostSharingEdge],
        source_id: int,
        destination_id: int
    ) -> Optional[List[int]]:
        path = find_path(build_adjacency(edges), destination_id, source_id)
        if path is None:
            return None
        # source -> destination -> ... -> (back to source)
        return [source_id] + path[:-1]

    def validate_new_edge(self, source_id: int, destination_id: int) -> None:
        """
        Check that a single new edge keeps the sharing graph acyclic.

        Raises:
            ValidationError: If source and destination are the same project
            CostSharingCycleError: If the edge would close a cycle
        """
        if source_id == destination_id:
            raise ValidationError("destination_project_id", "a project cannot share cost with itself")

        if self.cycle_detection == "reciprocal":
            if self.would_create_cycle(source_id, destination_id):
                logger.warning(f"Rejected reciprocal sharing edge {source_id} -> {destination_id}")
                raise CostSharingCycleError(source_id, destination_id)
            return

        path = self._cycle_path(self.store.find_all_edges(), source_id, destination_id)
        if path is not None:
            logger.warning(f"Rejected sharing edge {source_id} -> {destination_id}, cycle {path}")
            raise CostSharingCycleError(source_id, destination_id, path=path)

    # =========================================================================
    # Edge Updates
    # =========================================================================

    def _validate_percentage(self, percentage) -> Decimal:
        """Round to the stored precision, then check the range on the rounded value."""
        try:
            value = percentage if isinstance(percentage, Decimal) else Decimal(str(percentage))
        except (InvalidOperation, ValueError):
            raise InvalidPercentageError(percentage, self.max_percentage)
        if not value.is_finite():
            raise InvalidPercentageError(percentage, self.max_percentage)
        value = value.quantize(PERCENTAGE_QUANTUM, rounding=ROUND_HALF_UP)
        if value <= ZERO or value > self.max_percentage:
            raise InvalidPercentageError(percentage, self.max_percentage)
        return value

    def replace_outgoing_edges(
        self,
        project_id: int,
        edges: Iterable[CostSharingEdge]
    ) -> List[CostSharingEdge]:
        """
        Replace every outgoing edge of a project.

        All edges are validated against the graph as it will look after
        the replacement before anything is written; the store then swaps
        the edge set atomically. The sharing graph is locked before the
        cycle check so concurrent replacements cannot both pass it. On
        databases without row locks (SQLite) the lock is a no-op and
        concurrent writers are not serialized.

        Args:
            project_id: Source project whose edges are replaced
            edges: New outgoing edges (may be empty to clear sharing)

        Returns:
            The stored edges with normalized percentages

        Raises:
            ProjectNotFoundError: If the project or a destination is missing
            InvalidPercentageError: If a percentage, rounded to two decimal
                places, is outside (0, 100]
            ValidationError: On self edges, duplicates or wrong source
            CostSharingCycleError: If an edge would close a cycle
        """
        self.store.lock_sharing_graph()
        if self.store.find_project_by_id(project_id) is None:
            raise ProjectNotFoundError(project_id)

        new_edges: List[CostSharingEdge] = []
        seen: Set[int] = set()
        for edge in edges:
            if edge.source_project_id != project_id:
                raise ValidationError(
                    "source_project_id",
                    f"edge source {edge.source_project_id} does not match project {project_id}"
                )
            destination_id = edge.destination_project_id
            if destination_id == project_id:
                raise ValidationError("destination_project_id", "a project cannot share cost with itself")
            if destination_id in seen:
                raise ValidationError(
                    "destination_project_id", f"duplicate destination project {destination_id}"
                )
            if self.store.find_project_by_id(destination_id) is None:
                raise ProjectNotFoundError(destination_id)
            seen.add(destination_id)
            new_edges.append(CostSharingEdge(
                source_project_id=project_id,
                destination_project_id=destination_id,
                percentage=self._validate_percentage(edge.percentage),
            ))

        if self.cycle_detection == "reciprocal":
            for edge in new_edges:
                if self.would_create_cycle(project_id, edge.destination_project_id):
                    logger.warning(
                        f"Rejected reciprocal sharing edge {project_id} -> {edge.destination_project_id}"
                    )
                    raise CostSharingCycleError(project_id, edge.destination_project_id)
        else:
            remaining = [e for e in self.store.find_all_edges() if e.source_project_id != project_id]
            candidate = remaining + new_edges
            for edge in new_edges:
                path = self._cycle_path(candidate, project_id, edge.destination_project_id)
                if path is not None:
                    logger.warning(
                        f"Rejected sharing edge {project_id} -> {edge.destination_project_id}, cycle {path}"
                    )
                    raise CostSharingCycleError(project_id, edge.destination_project_id, path=path)

        self.store.replace_outgoing_edges(project_id, new_edges)
        logger.info(f"Replaced outgoing cost sharing of project {project_id}: {len(new_edges)} edge(s)")
        return new_edges

    def find_graph_cycle(self) -> Optional[List[int]]:
        """Audit the stored graph; any cycle here predates full-graph checking."""
        return find_cycle(self.store.find_all_edges())
