"""
Unit tests for the k-means clustering engine.

Tests initialization, assignment, update and convergence behavior:
- value-distinct initialization with a bounded draw budget
- nearest-centroid assignment with first-index tie breaking
- empty cluster reseeding
- bounded iteration
"""
import numpy as np
import pytest

from palette_api.services.colors.errors import (
    ClusteringDidNotConvergeError, InsufficientDistinctColorsError, InvalidInputError
)
from palette_api.services.colors.kmeans import (
    KMeansConfig, assign_clusters, cluster_colors, init_centroids, update_centroids
)


def solid_regions(colors, per_color=50):
    return np.repeat(np.array(colors, dtype=np.float64), per_color, axis=0)


class TestKMeansConfig:
    """Test configuration validation"""

    def test_defaults_are_valid(self):
        cfg = KMeansConfig()
        assert cfg.max_iter >= 1
        assert cfg.init_max_attempts >= 1

    @pytest.mark.parametrize("kwargs", [{"max_iter": 0}, {"init_max_attempts": 0}])
    def test_rejects_non_positive_bounds(self, kwargs):
        with pytest.raises(ValueError):
            KMeansConfig(**kwargs)


class TestInitCentroids:
    """Test random value-distinct initialization"""

    def test_centroids_are_distinct_samples(self):
        samples = solid_regions([(0, 0, 0), (255, 0, 0), (0, 255, 0), (0, 0, 255)])
        centroids = init_centroids(samples, 4, np.random.default_rng(7))

        assert centroids.shape == (4, 3)
        assert len(np.unique(centroids, axis=0)) == 4
        for centroid in centroids:
            assert np.any(np.all(samples == centroid, axis=1))

    def test_duplicates_accepted_when_budget_exhausted(self):
        samples = solid_regions([(10, 20, 30)])
        centroids = init_centroids(samples, 3, np.random.default_rng(0), max_attempts=5)

        np.testing.assert_array_equal(centroids, [[10, 20, 30]] * 3)

    def test_duplicates_rejected_when_disallowed(self):
        samples = solid_regions([(10, 20, 30), (40, 50, 60)])
        with pytest.raises(InsufficientDistinctColorsError) as exc_info:
            init_centroids(samples, 3, np.random.default_rng(0),
                           max_attempts=50, allow_duplicates=False)

        assert exc_info.value.k == 3
        assert exc_info.value.found == 2


class TestAssignAndUpdate:
    """Test single assignment and update steps"""

    def test_assigns_to_nearest(self):
        samples = np.array([[0, 0, 0], [9, 9, 9], [100, 100, 100]], dtype=np.float64)
        centroids = np.array([[1, 1, 1], [90, 90, 90]], dtype=np.float64)

        np.testing.assert_array_equal(assign_clusters(samples, centroids), [0, 0, 1])

    def test_ties_go_to_first_centroid(self):
        samples = np.array([[5, 5, 5]], dtype=np.float64)
        centroids = np.array([[0, 5, 5], [10, 5, 5], [5, 5, 5]], dtype=np.float64)
        centroids[2] = centroids[0]  # duplicate of slot 0

        assert assign_clusters(samples, centroids)[0] == 0

    def test_update_takes_means(self):
        samples = np.array([[0, 0, 0], [10, 20, 30], [100, 100, 100]], dtype=np.float64)
        labels = np.array([0, 0, 1])
        centroids, reseeded = update_centroids(samples, labels, 2, np.random.default_rng(0))

        assert not reseeded
        np.testing.assert_array_equal(centroids, [[5, 10, 15], [100, 100, 100]])

    def test_empty_cluster_reseeded_from_population(self):
        samples = np.array([[0, 0, 0], [10, 10, 10], [200, 200, 200]], dtype=np.float64)
        labels = np.array([0, 0, 0])
        centroids, reseeded = update_centroids(samples, labels, 2, np.random.default_rng(3))

        assert reseeded
        assert np.any(np.all(samples == centroids[1], axis=1))


class TestClusterColors:
    """Test the full clustering loop"""

    def test_single_color_converges_in_one_iteration(self):
        samples = solid_regions([(17, 99, 201)], per_color=200)
        result = cluster_colors(samples, 1, rng=np.random.default_rng(0))

        assert result.iterations == 1
        np.testing.assert_array_equal(result.centroids, [[17, 99, 201]])
        assert result.reseeded_iterations == 0

    def test_recovers_solid_regions(self):
        colors = [(220, 20, 60), (30, 144, 255), (50, 205, 50), (255, 215, 0)]
        samples = solid_regions(colors)

        for seed in range(5):
            result = cluster_colors(samples, 4, rng=np.random.default_rng(seed))
            found = {tuple(int(round(c)) for c in centroid) for centroid in result.centroids}
            assert found == set(colors)

    def test_clusters_partition_samples(self):
        samples = solid_regions([(0, 0, 0), (255, 255, 255)], per_color=30)
        result = cluster_colors(samples, 2, rng=np.random.default_rng(1))

        clusters = result.clusters
        assert len(clusters) == 2
        assert sum(len(c) for c in clusters) == len(samples)
        for centroid, members in zip(result.centroids, clusters):
            np.testing.assert_allclose(members.mean(axis=0), centroid)

    def test_converges_under_small_cap(self):
        rng = np.random.default_rng(99)
        samples = rng.uniform(0, 255, size=(400, 3))

        for k in (2, 4, 8):
            result = cluster_colors(samples, k, rng=np.random.default_rng(k),
                                    kmeans_config=KMeansConfig(max_iter=200))
            assert result.iterations <= 200
            assert result.centroids.shape == (k, 3)

    def test_more_clusters_than_colors(self):
        samples = solid_regions([(0, 0, 0), (255, 0, 0)])
        result = cluster_colors(samples, 5, rng=np.random.default_rng(2),
                                kmeans_config=KMeansConfig(max_iter=50, init_max_attempts=50))

        assert result.centroids.shape == (5, 3)
        assert {tuple(c) for c in result.centroids} <= {(0.0, 0.0, 0.0), (255.0, 0.0, 0.0)}
        assert result.reseeded_iterations >= 1

    def test_seeded_runs_are_reproducible(self):
        samples = np.random.default_rng(5).uniform(0, 255, size=(300, 3))
        a = cluster_colors(samples, 6, rng=np.random.default_rng(11))
        b = cluster_colors(samples, 6, rng=np.random.default_rng(11))

        np.testing.assert_array_equal(a.centroids, b.centroids)
        np.testing.assert_array_equal(a.labels, b.labels)

    def test_iteration_cap_raises(self):
        samples = np.array([[0, 0, 0], [10, 10, 10], [100, 100, 100], [110, 110, 110]],
                           dtype=np.float64)
        with pytest.raises(ClusteringDidNotConvergeError) as exc_info:
            cluster_colors(samples, 2, rng=np.random.default_rng(0),
                           kmeans_config=KMeansConfig(max_iter=1))

        assert exc_info.value.iterations == 1

    def test_empty_samples_rejected(self):
        with pytest.raises(InvalidInputError):
            cluster_colors(np.empty((0, 3)), 3)
