"""Tests for the graph model and layout states."""

import random

import pytest

from prettygraphs.errors import ConfigurationError, GraphFormatError
from prettygraphs.graph.model import Canvas, Edge, Graph, LayoutState, Node, random_graph


class TestEdgeConstruction:
    """Tests for deriving the edge list from adjacency lists."""

    def test_one_edge_per_declared_relation(self, square_graph):
        assert square_graph.edges == (Edge(1, 2), Edge(2, 3), Edge(3, 4), Edge(4, 1))

    def test_mutual_relations_kept_twice_by_default(self):
        graph = Graph.from_nodes([
            Node(id=1, neighbors=(2,)),
            Node(id=2, neighbors=(1,)),
        ])
        assert graph.edges == (Edge(1, 2), Edge(2, 1))

    def test_dedupe_collapses_mutual_relations(self):
        graph = Graph.from_nodes([
            Node(id=1, neighbors=(2,)),
            Node(id=2, neighbors=(1,)),
        ], dedupe_edges=True)
        assert graph.edges == (Edge(1, 2),)

    def test_dedupe_normalizes_direction(self):
        graph = Graph.from_nodes([
            Node(id=5, neighbors=(2,)),
            Node(id=2),
        ], dedupe_edges=True)
        assert graph.edges == (Edge(2, 5),)

    def test_self_relation_dropped(self):
        graph = Graph.from_nodes([Node(id=1, neighbors=(1, 2)), Node(id=2)])
        assert graph.edges == (Edge(1, 2),)
        assert graph.neighbors(1) == (2,)

    def test_unknown_neighbor_rejected(self):
        with pytest.raises(GraphFormatError):
            Graph.from_nodes([Node(id=1, neighbors=(9,))])

    def test_duplicate_node_id_rejected(self):
        with pytest.raises(GraphFormatError):
            Graph.from_nodes([Node(id=1), Node(id=1)])


class TestGraphAccessors:
    def test_node_ids_in_declaration_order(self, square_graph):
        assert square_graph.node_ids == [1, 2, 3, 4]

    def test_len_and_contains(self, square_graph):
        assert len(square_graph) == 4
        assert 3 in square_graph
        assert 7 not in square_graph

    def test_initial_state_uses_node_positions(self, square_graph):
        state = square_graph.initial_state()
        assert state[1] == (118.0, 118.0)
        assert state[3] == (138.0, 138.0)
        assert len(state) == 4


class TestLayoutState:
    def test_iteration_and_membership(self):
        state = LayoutState({4: (1.0, 1.0), 9: (2.0, 2.0)})
        assert list(state) == [4, 9]
        assert 9 in state


class TestCanvas:
    def test_clearance_inside(self):
        assert Canvas(100, 50).clearance(30, 20) == 20

    def test_clearance_outside_is_negative(self):
        assert Canvas(100, 100).clearance(-5, 50) == -5

    def test_invalid_size_rejected(self):
        with pytest.raises(ConfigurationError):
            Canvas(0, 100).validate()


class TestRandomGraph:
    def test_ids_and_bounds(self):
        canvas = Canvas(200, 100)
        graph = random_graph(8, canvas, 0.5, random.Random(1))
        assert graph.node_ids == list(range(1, 9))
        for x, y in graph.initial_state().positions.values():
            assert 0 <= x <= 200
            assert 0 <= y <= 100

    def test_reproducible_with_seed(self):
        g1 = random_graph(6, edge_probability=0.4, rng=random.Random(7))
        g2 = random_graph(6, edge_probability=0.4, rng=random.Random(7))
        assert g1.edges == g2.edges
        assert g1.initial_state() == g2.initial_state()

    def test_full_probability_links_every_pair(self):
        graph = random_graph(5, edge_probability=1.0, rng=random.Random(3))
        assert len(graph.edges) == 10

    def test_invalid_probability(self):
        with pytest.raises(ConfigurationError):
            random_graph(3, edge_probability=1.5)
