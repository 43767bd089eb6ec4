"""Tests for the pairwise distance matrix."""

from __future__ import annotations

import numpy as np
import pytest

from fact_graph.distance.matrix import DistanceMatrix, compute_distance_matrix, corpus_features
from fact_graph.graph.builder import GraphBuilder
from fact_graph.graph.model import Fact, FactGraph
from fact_graph.pipeline.config import DistanceConfig


@pytest.fixture()
def graphs(interleaved_documents) -> list[FactGraph]:
    builder = GraphBuilder()
    return [builder.build(doc, name=name) for name, doc in interleaved_documents]


class TestDistanceMatrixValidation:
    def test_accepts_valid_matrix(self):
        matrix = DistanceMatrix([[0, 1], [1, 0]])
        assert len(matrix) == 2
        assert matrix[0, 1] == 1.0
        assert matrix.row(1) == (1.0, 0.0)
        assert matrix.to_lists() == [[0.0, 1.0], [1.0, 0.0]]

    def test_rejects_non_square(self):
        with pytest.raises(ValueError, match="expected 2"):
            DistanceMatrix([[0, 1], [1]])

    def test_rejects_nonzero_diagonal(self):
        with pytest.raises(ValueError, match="Diagonal"):
            DistanceMatrix([[0.1, 1], [1, 0]])

    def test_rejects_asymmetry(self):
        with pytest.raises(ValueError, match="symmetric"):
            DistanceMatrix([[0, 1], [2, 0]])

    def test_rejects_negative_and_nan(self):
        with pytest.raises(ValueError, match="Invalid distance"):
            DistanceMatrix([[0, -1], [-1, 0]])
        nan = float("nan")
        with pytest.raises(ValueError):
            DistanceMatrix([[0, nan], [nan, 0]])

    def test_empty_matrix(self):
        assert len(DistanceMatrix([])) == 0

    def test_triangle_violations_counted(self):
        matrix = DistanceMatrix([[0, 1, 5], [1, 0, 1], [5, 1, 0]])
        assert matrix.triangle_violations() == 1

    def test_accepts_array_and_is_read_only(self):
        matrix = DistanceMatrix(np.array([[0.0, 2.0], [2.0, 0.0]]))
        assert matrix[1, 0] == 2.0
        with pytest.raises(ValueError):
            matrix.values[0, 1] = 3.0


class TestComputeDistanceMatrix:
    def test_shape_and_diagonal(self, graphs):
        matrix = compute_distance_matrix(graphs)
        assert len(matrix) == 6
        assert all(matrix[i, i] == 0.0 for i in range(6))

    def test_expected_distances(self, graphs):
        # order: cats-1, markets-1, cats-2, markets-2, cats-3, markets-3
        matrix = compute_distance_matrix(graphs)
        assert matrix[0, 2] == 0.0
        assert matrix[0, 4] == pytest.approx(0.4)
        assert matrix[1, 3] == pytest.approx(2 / 3)
        assert all(matrix[i, j] == 1.0 for i in (0, 2, 4) for j in (1, 3, 5))

    def test_jaccard_has_no_triangle_violations(self, graphs):
        assert compute_distance_matrix(graphs).triangle_violations() == 0

    @pytest.mark.parametrize("metric", ["weighted_jaccard", "cosine", "euclidean"])
    def test_parallel_matches_serial(self, graphs, metric):
        config = DistanceConfig(metric=metric)
        serial = compute_distance_matrix(graphs, config, workers=1)
        parallel = compute_distance_matrix(graphs, config, workers=2)
        for p_row, s_row in zip(parallel.to_lists(), serial.to_lists()):
            assert p_row == pytest.approx(s_row)

    def test_single_graph(self, graphs):
        assert compute_distance_matrix(graphs[:1]).to_lists() == [[0.0]]

    def test_no_graphs(self):
        assert len(compute_distance_matrix([])) == 0

    def test_cosine_can_break_triangle_inequality(self):
        first = Fact("x", "owns", "y")
        second = Fact("p", "owns", "q")
        graphs = [
            FactGraph.from_facts([first]),
            FactGraph.from_facts([first, second]),
            FactGraph.from_facts([second]),
        ]
        cosine = compute_distance_matrix(graphs, DistanceConfig(metric="cosine"))
        jaccard = compute_distance_matrix(graphs)
        assert cosine.triangle_violations() > 0
        assert jaccard.triangle_violations() == 0

    @pytest.mark.parametrize("metric", ["weighted_jaccard", "cosine", "euclidean"])
    def test_identical_histograms_exactly_zero(self, graphs, metric):
        # cats-1 and cats-2 are the same document
        matrix = compute_distance_matrix(graphs, DistanceConfig(metric=metric))
        assert matrix[0, 2] == 0.0
        assert matrix[2, 0] == 0.0

    def test_precomputed_features_reused(self, graphs):
        config = DistanceConfig(metric="cosine")
        features = corpus_features(graphs, config)
        reused = compute_distance_matrix(graphs, config, features=features)
        assert reused.to_lists() == compute_distance_matrix(graphs, config).to_lists()


class TestFeatureReduction:
    def test_default_keeps_all_columns(self, graphs):
        features = corpus_features(graphs)
        assert len(features) == 6
        assert features.n_features == len(set().union(*features.histograms))

    def test_trimming_everything_gives_zero_matrix(self, graphs):
        config = DistanceConfig(min_feature_std=100.0)
        features = corpus_features(graphs, config)
        assert features.n_features == 0
        matrix = compute_distance_matrix(graphs, config, features=features)
        assert matrix.to_lists() == [[0.0] * 6 for _ in range(6)]

    def test_projection_keeps_groups_apart(self, graphs):
        config = DistanceConfig(metric="euclidean", pca_components=2)
        features = corpus_features(graphs, config)
        assert features.vectors.shape == (6, 2)
        matrix = compute_distance_matrix(graphs, config, features=features)
        assert matrix[0, 2] == 0.0
        assert matrix[0, 4] < matrix[0, 1]

    def test_dense_pads_empty_feature_matrix(self, graphs):
        features = corpus_features(graphs, DistanceConfig(min_feature_std=100.0))
        assert features.dense().shape == (6, 1)
