"""
Layout Energy Function

Scores a candidate layout; lower is better. The energy is the weighted
sum of five penalty terms:

1. Node separation - quadratic repulsion for nodes closer than
   ``min_node_distance``
2. Boundary clearance - quadratic penalty for nodes closer than
   ``min_edge_distance`` to the canvas border
3. Edge length - spring term pulling every edge toward ``ideal_length``
4. Intersections - harmonic penalty for each pair of crossing edges, so
   crossings between long edges cost more than between short ones
5. Angles - squared deviation of the angle between two neighbors from
   ``ideal_angle`` (experimental, disabled by default)

The energy is recomputed from scratch on every call. Cost is
O(n^2 + e^2), fine for graphs with tens of nodes.
"""

import logging
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional, Tuple

from ..errors import ConfigurationError
from ..geometry import distance, neighbor_angle, segments_intersect, share_endpoint
from ..graph.model import Canvas, Graph, LayoutState

logger = logging.getLogger(__name__)


@dataclass
class EnergyWeights:
    """Multipliers for the five energy terms."""
    node_distance: float = 1.0
    boundary: float = 1.0
    edge_length: float = 1.0
    intersections: float = 1.0
    angles: float = 0.0  # experimental, unstable for high-degree nodes

    def validate(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if not value >= 0:
                raise ConfigurationError(f"Weight '{f.name}' must be non-negative, got {value}")

    def to_dict(self) -> Dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass
class EnergyConfig:
    """Configuration for the layout energy."""
    weights: EnergyWeights = field(default_factory=EnergyWeights)

    # Distance targets (canvas units)
    min_node_distance: float = 50.0
    min_edge_distance: float = 10.0
    ideal_length: float = 20.0
    ideal_angle: float = 60.0  # degrees

    canvas: Canvas = field(default_factory=Canvas)

    # Score each unordered node/edge pair twice, as ordered pairs
    ordered_pairs: bool = True
    # Do not test edges with a common endpoint for crossings. Off by default:
    # the orientation test then flags some adjacent edges as crossing,
    # depending on which way the path turns.
    skip_shared_endpoint_crossings: bool = False

    # Angle term
    max_angle_degree: int = 6  # skip nodes with more neighbors (0 = no cap)
    exact_angles: bool = False  # vector angles instead of the vertical-slope sentinel

    def validate(self):
        """Raise ConfigurationError if any constant would break the energy."""
        self.weights.validate()
        self.canvas.validate()
        for name in ("min_node_distance", "min_edge_distance", "ideal_length", "ideal_angle"):
            value = getattr(self, name)
            if not value > 0:
                raise ConfigurationError(f"'{name}' must be positive, got {value}")
        if not self.max_angle_degree >= 0:
            raise ConfigurationError(
                f"'max_angle_degree' must be non-negative, got {self.max_angle_degree}"
            )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, (EnergyWeights, Canvas)):
                value = value.to_dict()
            data[f.name] = value
        return data


@dataclass
class EnergyBreakdown:
    """Per-term contributions of one energy evaluation."""
    node_distance: float = 0.0
    boundary: float = 0.0
    edge_length: float = 0.0
    intersections: float = 0.0
    angles: float = 0.0
    crossing_count: int = 0

    @property
    def total(self) -> float:
        return (self.node_distance + self.boundary + self.edge_length
                + self.intersections + self.angles)

    def to_dict(self) -> Dict[str, float]:
        return {
            "node_distance": self.node_distance,
            "boundary": self.boundary,
            "edge_length": self.edge_length,
            "intersections": self.intersections,
            "angles": self.angles,
            "crossing_count": self.crossing_count,
            "total": self.total,
        }


class LayoutEnergy:
    """
    Energy function bound to one graph topology.

    Usage:
        energy = LayoutEnergy(graph, EnergyConfig(ideal_length=30))
        score = energy.evaluate(state)
        terms = energy.breakdown(state)
    """

    def __init__(self, graph: Graph, config: Optional[EnergyConfig] = None):
        self.graph = graph
        self.config = config or EnergyConfig()
        self.config.validate()

        self._node_ids = graph.node_ids
        self._edges = graph.edges
        self._pair_factor = 2.0 if self.config.ordered_pairs else 1.0
        self._angle_nodes = self._select_angle_nodes()

    def _select_angle_nodes(self) -> List[Tuple[int, Tuple[int, ...]]]:
        cap = self.config.max_angle_degree
        selected = []
        for node_id in self._node_ids:
            neighbors = self.graph.neighbors(node_id)
            if len(neighbors) < 2:
                continue
            if cap and len(neighbors) > cap:
                logger.debug(
                    "Angle term skips node %d (degree %d > %d)", node_id, len(neighbors), cap
                )
                continue
            selected.append((node_id, neighbors))
        return selected

    def evaluate(self, state: LayoutState) -> float:
        """Total energy of a layout."""
        return self.breakdown(state).total

    __call__ = evaluate

    def breakdown(self, state: LayoutState) -> EnergyBreakdown:
        """Compute every energy term for a layout."""
        result = EnergyBreakdown()
        weights = self.config.weights
        if weights.node_distance:
            result.node_distance = weights.node_distance * self._node_separation(state)
        if weights.boundary:
            result.boundary = weights.boundary * self._boundary_clearance(state)
        if weights.edge_length:
            result.edge_length = weights.edge_length * self._edge_length(state)
        if weights.intersections:
            penalty, count = self._intersections(state)
            result.intersections = weights.intersections * penalty
            result.crossing_count = count
        if weights.angles:
            result.angles = weights.angles * self._angles(state)
        return result

    def _node_separation(self, state: LayoutState) -> float:
        limit = self.config.min_node_distance
        total = 0.0
        ids = self._node_ids
        for i, id1 in enumerate(ids):
            p1 = state[id1]
            for id2 in ids[i + 1:]:
                d = distance(p1, state[id2])
                if d < limit:
                    total += (limit - d) ** 2 / limit
        return total * self._pair_factor

    def _boundary_clearance(self, state: LayoutState) -> float:
        limit = self.config.min_edge_distance
        canvas = self.config.canvas
        total = 0.0
        for node_id in self._node_ids:
            x, y = state[node_id]
            d = canvas.clearance(x, y)
            if d < limit:
                total += (limit - d) ** 2 / limit
        return total

    def _edge_length(self, state: LayoutState) -> float:
        ideal = self.config.ideal_length
        total = 0.0
        for source, target in self._edges:
            d = distance(state[source], state[target])
            total += (d - ideal) ** 2 / ideal
        return total

    def _intersections(self, state: LayoutState) -> Tuple[float, int]:
        segments = [(state[s], state[t]) for s, t in self._edges]
        lengths = [distance(a, b) for a, b in segments]
        skip_shared = self.config.skip_shared_endpoint_crossings

        total = 0.0
        count = 0
        n = len(segments)
        for i in range(n):
            a, b = segments[i]
            for k in range(i + 1, n):
                c, d = segments[k]
                if skip_shared and share_endpoint(a, b, c, d):
                    continue
                if not segments_intersect(a, b, c, d):
                    continue
                count += 1
                len1, len2 = lengths[i], lengths[k]
                if len1 > 0 and len2 > 0:
                    total += 1.0 / (1.0 / len1 + 1.0 / len2)

        # The orientation test is symmetric in the pair, so ordered pairs double it
        return total * self._pair_factor, count

    def _angles(self, state: LayoutState) -> float:
        ideal = self.config.ideal_angle
        exact = self.config.exact_angles
        total = 0.0
        for node_id, neighbors in self._angle_nodes:
            center = state[node_id]
            for i, n1 in enumerate(neighbors):
                for k, n2 in enumerate(neighbors):
                    if i == k or n1 == n2:
                        continue
                    angle = neighbor_angle(center, state[n1], state[n2], exact=exact)
                    total += (angle - ideal) ** 2 / ideal
        return total


def calculate_energy(state: LayoutState, graph: Graph,
                     config: Optional[EnergyConfig] = None) -> float:
    """Score a layout without keeping a ``LayoutEnergy`` around."""
    return LayoutEnergy(graph, config).evaluate(state)
