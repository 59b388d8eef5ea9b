"""Graph topology, layout states and graph file formats."""

from .model import Canvas, Edge, Graph, LayoutState, Node, random_graph
from .io import format_graph, parse_graph, read_graph_file, write_graph_file
from .snapshot import LayoutSnapshot, load_snapshot, save_snapshot

__all__ = [
    "Canvas",
    "Edge",
    "Graph",
    "LayoutState",
    "Node",
    "random_graph",
    "format_graph",
    "parse_graph",
    "read_graph_file",
    "write_graph_file",
    "LayoutSnapshot",
    "load_snapshot",
    "save_snapshot",
]
