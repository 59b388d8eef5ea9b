"""Tests for the layout visualizer."""

import json
import random
import re

import pytest

from prettygraphs.graph.model import Canvas, Edge, Graph, LayoutState, Node
from prettygraphs.layout.annealing import AnnealingSession
from prettygraphs.layout.visualizer import LayoutVisualizer


@pytest.fixture
def crossing_graph():
    """Two crossing edges plus one edge off to the side."""
    return Graph.from_nodes([
        Node(id=1, x=100.0, y=100.0, neighbors=(2,)),
        Node(id=2, x=140.0, y=140.0),
        Node(id=3, x=100.0, y=140.0, neighbors=(4,)),
        Node(id=4, x=140.0, y=100.0),
        Node(id=5, x=200.0, y=200.0, neighbors=(6,)),
        Node(id=6, x=220.0, y=200.0),
    ])


def test_crossing_edges(crossing_graph):
    viz = LayoutVisualizer(crossing_graph)
    crossing = viz.crossing_edges(crossing_graph.initial_state().positions)
    assert crossing == {Edge(1, 2), Edge(3, 4)}


def test_adjacent_edges_marked_by_default(square_graph):
    # Every corner of the square turns counter-clockwise under the orientation test
    viz = LayoutVisualizer(square_graph)
    assert viz.crossing_edges(square_graph.initial_state().positions) == set(square_graph.edges)


def test_adjacent_edges_skipped_on_request(square_graph):
    viz = LayoutVisualizer(square_graph, skip_shared_endpoints=True)
    assert viz.crossing_edges(square_graph.initial_state().positions) == set()


def test_render_frame_svg(crossing_graph):
    viz = LayoutVisualizer(crossing_graph)
    frame = viz.capture_frame("Initial", crossing_graph.initial_state(), best_energy=12.5)
    svg = viz.render_frame_svg(frame)
    assert svg.startswith("<svg")
    assert svg.count('class="node"') == 6
    assert svg.count('class="edge"') == 3
    assert svg.count("#e74c3c") == 2
    assert "energy 12.50" in svg


def test_render_scales_to_width(square_graph):
    viz = LayoutVisualizer(square_graph, canvas=Canvas(100.0, 50.0))
    frame = viz.capture_frame("Initial", LayoutState({1: (0, 0), 2: (10, 0), 3: (10, 10), 4: (0, 10)}))
    svg = viz.render_frame_svg(frame, width=200)
    # 200 + 2 * 20 padding, height follows the 2:1 aspect
    assert 'width="240" height="140"' in svg


def test_sink_captures_on_interval_and_final(scattered_cycle, fast_config):
    viz = LayoutVisualizer(scattered_cycle, interval=10)
    session = AnnealingSession(scattered_cycle, fast_config, rng=random.Random(0), sink=viz)
    result = session.run()
    assert result.iterations == 50
    assert [f.iteration for f in viz.frames] == [10, 20, 30, 40, 50]
    assert viz.frames[-1].label == "Final"
    assert viz.frames[-1].positions == result.best_state.positions


def test_export_svg(square_graph, tmp_path):
    viz = LayoutVisualizer(square_graph)
    viz.capture_frame("Initial", square_graph.initial_state())
    path = viz.export_svg(tmp_path / "layout.svg")
    assert path.read_text().startswith("<svg")


def test_export_svg_without_frames(square_graph, tmp_path):
    with pytest.raises(ValueError):
        LayoutVisualizer(square_graph).export_svg(tmp_path / "layout.svg")


def test_export_html_report(square_graph, tmp_path):
    viz = LayoutVisualizer(square_graph)
    viz.capture_frame("Initial", square_graph.initial_state(), best_energy=3.0)
    viz.capture_frame("Final", square_graph.initial_state(), iteration=5, best_energy=1.0)
    path = viz.export_html_report(tmp_path / "reports" / "run.html")
    html = path.read_text()
    assert "__FRAMES__" not in html
    data = json.loads(re.search(r"const frames = (.*);\n", html).group(1))
    assert [f["label"] for f in data] == ["Initial", "Final"]
    assert data[1]["best_energy"] == 1.0
