"""
Shared test fixtures for PrettyGraphs tests.

Provides reusable graphs, layouts and configurations for the geometry,
energy, annealing and CLI tests.
"""

import random

import pytest

from prettygraphs.graph.model import Canvas, Graph, Node
from prettygraphs.layout.annealing import AnnealingConfig
from prettygraphs.layout.energy import EnergyConfig, EnergyWeights


GRAPH_TEXT = """\
# small sample graph
node 1 40 40
node 2 200 60
node 3 120 200
node 4 60 150
rel 1 2
rel 2 3
rel 3 4
rel 4 1
rel 1 3
"""


@pytest.fixture
def square_graph() -> Graph:
    """A 4-cycle laid out as a square with side 20 in the canvas center."""
    nodes = [
        Node(id=1, x=118.0, y=118.0, neighbors=(2,)),
        Node(id=2, x=138.0, y=118.0, neighbors=(3,)),
        Node(id=3, x=138.0, y=138.0, neighbors=(4,)),
        Node(id=4, x=118.0, y=138.0, neighbors=(1,)),
    ]
    return Graph.from_nodes(nodes)


@pytest.fixture
def scattered_cycle() -> Graph:
    """A 4-cycle with random positions inside a 200x200 area of the canvas."""
    rng = random.Random(2024)
    nodes = []
    for node_id in range(1, 5):
        nodes.append(Node(
            id=node_id,
            x=28.0 + rng.random() * 200.0,
            y=28.0 + rng.random() * 200.0,
            neighbors=(node_id % 4 + 1,),
        ))
    return Graph.from_nodes(nodes)


@pytest.fixture
def two_node_graph() -> Graph:
    """Two nodes joined by one edge, 30 units apart."""
    return Graph.from_nodes([
        Node(id=1, x=100.0, y=128.0, neighbors=(2,)),
        Node(id=2, x=130.0, y=128.0),
    ])


@pytest.fixture
def default_energy_config() -> EnergyConfig:
    return EnergyConfig()


@pytest.fixture
def only_weights():
    """Build an EnergyConfig with every weight zero except the named ones."""
    def factory(**weights) -> EnergyConfig:
        base = dict(node_distance=0.0, boundary=0.0, edge_length=0.0,
                    intersections=0.0, angles=0.0)
        base.update(weights)
        return EnergyConfig(weights=EnergyWeights(**base))
    return factory


@pytest.fixture
def fast_config() -> AnnealingConfig:
    """A short schedule that stops on whichever bound comes first."""
    from prettygraphs.layout.annealing import TerminationMode
    return AnnealingConfig(
        initial_temperature=10.0,
        cooling_factor=0.9,
        max_iterations=50,
        termination=TerminationMode.EITHER,
    )


@pytest.fixture
def canvas() -> Canvas:
    return Canvas(256.0, 256.0)


@pytest.fixture
def graph_file(tmp_path):
    """A sample graph file on disk."""
    path = tmp_path / "graph.txt"
    path.write_text(GRAPH_TEXT)
    return path
