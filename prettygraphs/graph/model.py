"""
Graph Model

Lightweight node/edge representation decoupled from any visual or
physics object. Nodes reference their neighbors by integer id; the edge
list is derived once from the adjacency lists and never changes while a
layout is being optimized. Only positions (held in ``LayoutState``) move.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, NamedTuple, Optional, Tuple

from ..errors import ConfigurationError, GraphFormatError

logger = logging.getLogger(__name__)

Position = Tuple[float, float]


@dataclass(frozen=True)
class Canvas:
    """Rectangular drawing area nodes are kept inside of."""
    width: float = 256.0  # 16x16 grid of 16px cells
    height: float = 256.0

    def validate(self):
        if not (self.width > 0 and self.height > 0):
            raise ConfigurationError(
                f"Canvas size must be positive, got {self.width}x{self.height}"
            )

    def clearance(self, x: float, y: float) -> float:
        """Distance from (x, y) to the nearest canvas border.

        Negative when the point lies outside the canvas.
        """
        return min(x, self.width - x, y, self.height - y)

    def to_dict(self) -> Dict[str, float]:
        return {"width": self.width, "height": self.height}


@dataclass(frozen=True)
class Node:
    """A graph node: stable id, initial position, ordered neighbor ids."""
    id: int
    x: float = 0.0
    y: float = 0.0
    neighbors: Tuple[int, ...] = ()

    @property
    def position(self) -> Position:
        return (self.x, self.y)


class Edge(NamedTuple):
    """A connection between two node ids."""
    source: int
    target: int

    def normalized(self) -> "Edge":
        """Return the edge with the smaller id first."""
        if self.source <= self.target:
            return self
        return Edge(self.target, self.source)


@dataclass(frozen=True)
class LayoutState:
    """One complete assignment of positions to graph nodes.

    Instances are never mutated; operations build new states.
    """
    positions: Dict[int, Position] = field(default_factory=dict)

    def __getitem__(self, node_id: int) -> Position:
        return self.positions[node_id]

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.positions

    def __iter__(self) -> Iterator[int]:
        return iter(self.positions)

    def __len__(self) -> int:
        return len(self.positions)

    def items(self):
        return self.positions.items()


class Graph:
    """
    Immutable graph topology.

    Build with ``Graph.from_nodes``. The edge list follows one of two
    conventions selected by ``dedupe_edges``:

    - ``False``: one edge per declared adjacency, in declaration order. A
      relation listed on both endpoints produces two edges and is counted
      twice by every edge term of the energy.
    - ``True``: each undirected pair is stored once, normalized so the
      smaller id comes first.
    """

    def __init__(self, nodes: Dict[int, Node], edges: Tuple[Edge, ...],
                 dedupe_edges: bool = False):
        self._nodes = nodes
        self._edges = edges
        self.dedupe_edges = dedupe_edges

    @classmethod
    def from_nodes(cls, nodes: Iterable[Node], dedupe_edges: bool = False) -> "Graph":
        """
        Build a graph and its edge list from nodes with neighbor ids.

        Self references are dropped. Neighbor ids that do not name a node
        of the graph raise ``GraphFormatError``.
        """
        by_id: Dict[int, Node] = {}
        for node in nodes:
            if node.id in by_id:
                raise GraphFormatError(f"Duplicate node id {node.id}")
            by_id[node.id] = node

        edges: List[Edge] = []
        seen = set()
        for node in by_id.values():
            for neighbor_id in node.neighbors:
                if neighbor_id == node.id:
                    logger.debug("Dropping self relation on node %d", node.id)
                    continue
                if neighbor_id not in by_id:
                    raise GraphFormatError(
                        f"Node {node.id} references unknown neighbor {neighbor_id}"
                    )
                edge = Edge(node.id, neighbor_id)
                if dedupe_edges:
                    edge = edge.normalized()
                    if edge in seen:
                        continue
                    seen.add(edge)
                edges.append(edge)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Built graph: nodes=%d edges=%d dedupe=%s",
                len(by_id), len(edges), dedupe_edges,
            )
        return cls(by_id, tuple(edges), dedupe_edges=dedupe_edges)

    @property
    def node_ids(self) -> List[int]:
        return list(self._nodes)

    @property
    def edges(self) -> Tuple[Edge, ...]:
        return self._edges

    def neighbors(self, node_id: int) -> Tuple[int, ...]:
        """Declared neighbor ids of a node, self references removed."""
        return tuple(n for n in self._nodes[node_id].neighbors if n != node_id)

    def initial_state(self) -> LayoutState:
        """Layout built from the positions the nodes were created with."""
        return LayoutState({nid: node.position for nid, node in self._nodes.items()})

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __repr__(self) -> str:
        return f"Graph(nodes={len(self._nodes)}, edges={len(self._edges)})"


def random_graph(
    count: int,
    canvas: Optional[Canvas] = None,
    edge_probability: float = 0.3,
    rng: Optional[random.Random] = None,
) -> Graph:
    """
    Scatter ``count`` nodes uniformly on the canvas and link random pairs.

    Ids run from 1 to ``count``. Each unordered pair is linked with
    ``edge_probability``; the relation is declared on the lower id only.
    """
    if count < 0:
        raise ConfigurationError(f"Node count must be non-negative, got {count}")
    if not 0.0 <= edge_probability <= 1.0:
        raise ConfigurationError(
            f"Edge probability must be within [0, 1], got {edge_probability}"
        )
    canvas = canvas or Canvas()
    rng = rng or random.Random()

    positions = {
        node_id: (rng.random() * canvas.width, rng.random() * canvas.height)
        for node_id in range(1, count + 1)
    }
    relations: Dict[int, List[int]] = {node_id: [] for node_id in positions}
    for a in range(1, count + 1):
        for b in range(a + 1, count + 1):
            if rng.random() < edge_probability:
                relations[a].append(b)

    nodes = [
        Node(id=node_id, x=x, y=y, neighbors=tuple(relations[node_id]))
        for node_id, (x, y) in positions.items()
    ]
    return Graph.from_nodes(nodes)
