"""
Graph Text Format

Reads and writes the plain-text graph files used by the sandbox demo::

    # comment
    node 1 40 60
    node 2 120 60
    rel 1 2

``node <id> <x> <y>`` declares a node, ``rel <id1> <id2>`` appends id2 to
the neighbor list of id1. Relations may reference nodes declared later in
the file.

Two parsing modes are supported:

- lenient (default): malformed lines, duplicate node ids, relations to
  unknown nodes and self relations are logged and skipped.
- strict: the first problem raises ``GraphFormatError`` with its line
  number and nothing is returned.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from ..errors import GraphFormatError
from .model import Graph, LayoutState, Node

logger = logging.getLogger(__name__)

NODE_KEYWORD = "node"
RELATION_KEYWORD = "rel"


def _parse_id(token: str) -> int:
    value = int(token)
    if value < 0:
        raise ValueError(f"negative id {value}")
    return value


def parse_graph(text: str, strict: bool = False, dedupe_edges: bool = False,
                source: str = "<string>") -> Graph:
    """
    Parse graph text into a ``Graph``.

    Args:
        text: File contents
        strict: Raise on the first malformed line instead of skipping it
        dedupe_edges: Collapse relations declared on both endpoints
        source: Name used in log messages

    Returns:
        The parsed graph

    Raises:
        GraphFormatError: In strict mode, on any malformed input
    """
    positions: Dict[int, Tuple[float, float]] = {}
    relations: Dict[int, List[int]] = {}
    pending: List[Tuple[int, int, int]] = []  # (line_number, from_id, to_id)
    skipped = 0

    def reject(message: str, line_number: int):
        nonlocal skipped
        if strict:
            raise GraphFormatError(message, line_number)
        skipped += 1
        logger.warning("%s:%d: %s (line skipped)", source, line_number, message)

    for line_number, raw in enumerate(text.splitlines(), start=1):
        line = raw.split("#", 1)[0].strip()
        if not line:
            continue

        tokens = line.split()
        keyword = tokens[0].lower()

        if keyword == NODE_KEYWORD:
            if len(tokens) != 4:
                reject(f"expected 'node <id> <x> <y>', got {line!r}", line_number)
                continue
            try:
                node_id = _parse_id(tokens[1])
                x, y = float(tokens[2]), float(tokens[3])
            except ValueError as e:
                reject(f"invalid node declaration {line!r}: {e}", line_number)
                continue
            if node_id in positions:
                reject(f"duplicate node id {node_id}", line_number)
                continue
            positions[node_id] = (x, y)
            relations[node_id] = []

        elif keyword == RELATION_KEYWORD:
            if len(tokens) != 3:
                reject(f"expected 'rel <id1> <id2>', got {line!r}", line_number)
                continue
            try:
                from_id, to_id = _parse_id(tokens[1]), _parse_id(tokens[2])
            except ValueError as e:
                reject(f"invalid relation {line!r}: {e}", line_number)
                continue
            if from_id == to_id:
                reject(f"self relation on node {from_id}", line_number)
                continue
            pending.append((line_number, from_id, to_id))

        else:
            reject(f"unknown keyword {tokens[0]!r}", line_number)

    # Relations are resolved after all nodes are known
    for line_number, from_id, to_id in pending:
        missing = [nid for nid in (from_id, to_id) if nid not in positions]
        if missing:
            reject(f"relation references unknown node {missing[0]}", line_number)
            continue
        relations[from_id].append(to_id)

    nodes = [
        Node(id=node_id, x=x, y=y, neighbors=tuple(relations[node_id]))
        for node_id, (x, y) in positions.items()
    ]
    graph = Graph.from_nodes(nodes, dedupe_edges=dedupe_edges)

    if skipped:
        logger.warning("%s: skipped %d malformed line(s)", source, skipped)
    logger.debug("Parsed %s: %d nodes, %d edges", source, len(graph), len(graph.edges))
    return graph


def read_graph_file(path: Union[str, Path], strict: bool = False,
                    dedupe_edges: bool = False) -> Graph:
    """Load a graph file from disk. See ``parse_graph``."""
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    return parse_graph(text, strict=strict, dedupe_edges=dedupe_edges, source=str(path))


def format_graph(graph: Graph, state: Optional[LayoutState] = None,
                 precision: int = 2) -> str:
    """
    Render a graph in the text format.

    Args:
        graph: Graph whose topology is written
        state: Positions to write (defaults to the nodes' own positions)
        precision: Decimal places for coordinates
    """
    state = state or graph.initial_state()
    lines = []
    for node_id in graph.node_ids:
        x, y = state[node_id]
        lines.append(f"{NODE_KEYWORD} {node_id} {x:.{precision}f} {y:.{precision}f}")
    for node_id in graph.node_ids:
        for neighbor_id in graph.neighbors(node_id):
            lines.append(f"{RELATION_KEYWORD} {node_id} {neighbor_id}")
    return "\n".join(lines) + "\n"


def write_graph_file(graph: Graph, path: Union[str, Path],
                     state: Optional[LayoutState] = None) -> Path:
    """Write a graph (optionally with optimized positions) to disk."""
    path = Path(path)
    path.write_text(format_graph(graph, state), encoding="utf-8")
    logger.info("Wrote graph with %d nodes to %s", len(graph), path)
    return path
