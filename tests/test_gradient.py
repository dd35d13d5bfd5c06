"""
Tests for the RWR Gradient Module.

Checks the derivative recurrence against hand-computed values and against
a direct step-by-step evaluation of the recurrence on random graphs.
"""

import pytest
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from srw.graph import AnnotatedGraph
from srw.model import FeatureGate
from srw.walks import (
    edge_weight,
    total_edge_weight,
    walk_once,
    rwr,
    rwr_with_derivative,
    deriv_rwr_by_params,
    deriv_walk_prob_by_params,
)


def step_by_step_derivative(graph, start, params, steps, untrained=()):
    """Evaluate dNext[u][f] += w(j,u) * d[j][f] + p[j] * dQ_ju/dw_f one term at a time."""
    p = dict(start)
    d = {}
    for _ in range(steps):
        d_next = {}
        for j, mass in p.items():
            z = total_edge_weight(graph, j, params)
            if mass <= 0 or z == 0:
                continue
            for u in graph.outgoing_neighbors(j):
                w = edge_weight(graph, j, u, params)
                on_edge = {feat.name: feat.weight for feat in graph.features_on(j, u)}
                edge_total = sum(on_edge.values())
                for f in (set(on_edge) | set(d.get(j, {}))) - set(untrained):
                    dq = (on_edge[f] * z - w * edge_total) / (z * z) if f in on_edge else 0.0
                    row = d_next.setdefault(u, {})
                    row[f] = row.get(f, 0.0) + w * d.get(j, {}).get(f, 0.0) + mass * dq
        p = walk_once(graph, p, params)
        d = d_next
    return d


class TestWalkProbDerivative:
    """Tests for dQ_ju/dw_f."""

    @pytest.fixture
    def graph(self):
        """A -> B carries f and g, A -> C carries h."""
        return AnnotatedGraph.from_edge_list([
            ('A', 'B', {'f': 1.0, 'g': 1.0}),
            ('A', 'C', {'h': 1.0}),
        ])

    def test_quotient_rule(self, graph):
        """Z = 3, w(A,B) = 2, feature sum on (A,B) = 2."""
        params = {'f': 1.0, 'g': 1.0, 'h': 1.0}

        dq = deriv_walk_prob_by_params(graph, 'A', 'B', params)

        assert set(dq) == {'f', 'g'}
        assert dq['f'] == pytest.approx(-1.0 / 9.0)
        assert dq['g'] == pytest.approx(-1.0 / 9.0)

    def test_other_edge(self, graph):
        """Only features active on the edge itself get an entry."""
        params = {'f': 1.0, 'g': 1.0, 'h': 1.0}

        dq = deriv_walk_prob_by_params(graph, 'A', 'C', params)

        assert dq == {'h': pytest.approx(2.0 / 9.0)}

    def test_untrained_omitted(self, graph):
        """Untrained features get no entry."""
        params = {'f': 1.0, 'g': 1.0, 'h': 1.0}

        dq = deriv_walk_prob_by_params(graph, 'A', 'B', params, FeatureGate({'g'}))

        assert set(dq) == {'f'}

    def test_dead_end(self, graph):
        """A dead end has no transition derivative."""
        assert deriv_walk_prob_by_params(graph, 'B', 'A', {'f': 1.0}) == {}


class TestDerivRWR:
    """Tests for the derivative of the full walk."""

    def test_single_edge_untrained_feature(self):
        """On A -> B {f, g} with g untrained, f gets a nonzero derivative and g none."""
        graph = AnnotatedGraph.from_edge_list([('A', 'B', {'f': 1.0, 'g': 1.0})])
        gate = FeatureGate({'g'})

        d = deriv_rwr_by_params(graph, {'A': 1.0}, {'f': 1.0, 'g': 1.0}, steps=1, gate=gate)

        assert 'g' not in d['B']
        assert d['B']['f'] != 0.0
        assert d['B']['f'] == pytest.approx((1.0 * 2.0 - 2.0 * 2.0) / 4.0)

    def test_untrained_feature_excluded(self):
        """Untrained features never appear anywhere in the table."""
        graph = AnnotatedGraph.from_edge_list([
            ('A', 'B', {'f': 1.0, 'g': 1.0}),
            ('A', 'C', {'h': 1.0}),
        ])
        params = {'f': 1.0, 'g': 1.0, 'h': 1.0}

        d = deriv_rwr_by_params(graph, {'A': 1.0}, params, steps=1, gate=FeatureGate({'g'}))

        assert d['B'] == {'f': pytest.approx(-1.0 / 9.0)}
        assert d['C'] == {'h': pytest.approx(2.0 / 9.0)}

    def test_derivative_carried_by_edge_weight(self):
        """Held derivatives move along an edge scaled by its unnormalized weight."""
        graph = AnnotatedGraph.from_edge_list([
            ('A', 'B', {'f': 1.0}),
            ('A', 'C', {'g': 1.0}),
            ('B', 'D', {'h': 3.0}),
        ])
        params = {'f': 1.0, 'g': 1.0, 'h': 1.0}

        d = deriv_rwr_by_params(graph, {'A': 1.0}, params, steps=2)

        # step 1: d[B][f] = 1/4; step 2: w(B,D) = 3, dQ_BD/dh = 0
        assert d['D']['f'] == pytest.approx(0.75)
        assert d['D']['h'] == pytest.approx(0.0)
        assert 'g' not in d['D']

    def test_only_nodes_with_mass_contribute(self):
        """A node reached with zero mass passes on no derivative."""
        graph = AnnotatedGraph.from_edge_list([
            ('A', 'B', {'f': 1.0}),
            ('A', 'C', {'g': 1.0}),
            ('C', 'D', {'h': 1.0}),
        ])
        params = {'f': 1.0, 'g': 0.0, 'h': 1.0}

        p1, d1 = rwr_with_derivative(graph, {'A': 1.0}, params, steps=1)
        assert p1['C'] == 0.0
        assert d1['C']['g'] == pytest.approx(1.0)

        d2 = deriv_rwr_by_params(graph, {'A': 1.0}, params, steps=2)
        assert 'D' not in d2

    def test_zero_steps(self):
        """The start vector has no derivative."""
        graph = AnnotatedGraph.from_edge_list([('A', 'B', {'f': 1.0})])
        assert deriv_rwr_by_params(graph, {'A': 1.0}, {'f': 1.0}, steps=0) == {}

    def test_dead_end_contributes_nothing(self):
        """Mass and derivative stop at dead ends."""
        graph = AnnotatedGraph.from_edge_list([
            ('A', 'B', {'f': 1.0}),
            ('A', 'C', {'g': 1.0}),
        ])
        p, d = rwr_with_derivative(graph, {'A': 1.0}, {'f': 1.0, 'g': 1.0}, steps=2)

        assert p == {}
        assert d == {}

    def test_forward_byproduct_matches_rwr(self):
        """The co-computed distribution equals the forward walk."""
        graph = AnnotatedGraph.create_mock(num_nodes=25, seed=2)
        params = {name: 1.0 + i for i, name in enumerate(sorted(graph.all_feature_names()))}
        start = {0: 0.5, 1: 0.5}

        p, _ = rwr_with_derivative(graph, start, params, steps=4)
        expected = rwr(graph, start, params, steps=4)

        assert set(p) == set(expected)
        for node in expected:
            assert p[node] == pytest.approx(expected[node])

    @pytest.mark.parametrize('seed', [3, 9, 17])
    def test_matches_recurrence_on_mock_graph(self, seed):
        """Table equals a term-by-term evaluation over several steps with dead ends."""
        graph = AnnotatedGraph.create_mock(num_nodes=20, num_features=3, dead_end_fraction=0.15, seed=seed)
        features = sorted(graph.all_feature_names())
        params = {name: 0.5 + 0.4 * i for i, name in enumerate(features)}
        start = {node: 0.25 for node in graph.nodes[:4]}

        d = deriv_rwr_by_params(graph, start, params, steps=4, gate=FeatureGate({'f1'}))
        expected = step_by_step_derivative(graph, start, params, 4, untrained={'f1'})

        assert set(d) == set(expected)
        for node, row in expected.items():
            assert set(d[node]) == set(row)
            for feature, value in row.items():
                assert d[node][feature] == pytest.approx(value, rel=1e-9, abs=1e-12)

    def test_gate_only_removes_entries(self):
        """Trainable entries are unchanged by freezing other features."""
        graph = AnnotatedGraph.create_mock(num_nodes=20, num_features=3, seed=4)
        params = {name: 1.0 for name in graph.all_feature_names()}
        start = {0: 1.0}

        full = deriv_rwr_by_params(graph, start, params, steps=3)
        gated = deriv_rwr_by_params(graph, start, params, steps=3, gate=FeatureGate({'f0'}))

        for node, row in gated.items():
            assert 'f0' not in row
            for feature, value in row.items():
                assert value == pytest.approx(full[node][feature])


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
