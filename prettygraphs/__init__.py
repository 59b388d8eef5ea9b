"""
PrettyGraphs - Simulated-Annealing Graph Layout

Arranges graph nodes in 2D by minimising a layout energy made of node
separation, boundary clearance, edge-length uniformity, edge-crossing and
optional angular-regularity terms.
"""

__version__ = "0.1.0"

from .errors import ConfigurationError, GraphFormatError, PrettyGraphsError, SessionStateError
from .graph import Canvas, Edge, Graph, LayoutState, Node, read_graph_file
from .layout import (
    AnnealingConfig,
    AnnealingSession,
    EnergyConfig,
    EnergyWeights,
    LayoutEnergy,
    SessionStatus,
    VelocitySink,
    perturb,
)

__all__ = [
    "ConfigurationError",
    "GraphFormatError",
    "PrettyGraphsError",
    "SessionStateError",
    "Canvas",
    "Edge",
    "Graph",
    "LayoutState",
    "Node",
    "read_graph_file",
    "AnnealingConfig",
    "AnnealingSession",
    "EnergyConfig",
    "EnergyWeights",
    "LayoutEnergy",
    "SessionStatus",
    "VelocitySink",
    "perturb",
]
