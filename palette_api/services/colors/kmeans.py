"""
K-Means clustering over RGB color samples.

Plain Lloyd iterations in raw RGB space with value-distinct random
initialization and random reseeding of empty clusters. Both the initial draw
and the iteration loop are bounded so a degenerate input cannot hang a
request.
"""

from dataclasses import dataclass
from typing import List, Optional

import numpy as np
from loguru import logger

from palette_api.config import config
from .errors import (
    ClusteringDidNotConvergeError,
    InsufficientDistinctColorsError,
    InvalidInputError,
)


@dataclass
class KMeansConfig:
    """
    Configuration for K-Means clustering.

    Attributes:
        max_iter: Iteration bound before giving up
        init_max_attempts: Random draws per centroid slot before the
            distinct-value requirement is relaxed
        allow_duplicate_centroids: Accept a duplicate centroid once the draw
            budget is exhausted instead of raising
    """
    max_iter: int = config.KMEANS_MAX_ITER
    init_max_attempts: int = config.KMEANS_INIT_MAX_ATTEMPTS
    allow_duplicate_centroids: bool = config.ALLOW_DUPLICATE_CENTROIDS

    def __post_init__(self):
        """Validate configuration parameters."""
        if self.max_iter < 1:
            raise ValueError(f"max_iter must be >= 1, got {self.max_iter}")
        if self.init_max_attempts < 1:
            raise ValueError(f"init_max_attempts must be >= 1, got {self.init_max_attempts}")


@dataclass
class KMeansResult:
    """Converged centroids (k, 3), per-sample labels (N,), iteration count and
    the number of iterations that had to reseed an empty cluster."""
    centroids: np.ndarray
    labels: np.ndarray
    samples: np.ndarray
    iterations: int
    reseeded_iterations: int = 0

    @property
    def clusters(self) -> List[np.ndarray]:
        """Samples assigned to each centroid, in centroid order."""
        return [self.samples[self.labels == i] for i in range(len(self.centroids))]


def init_centroids(samples: np.ndarray, k: int, rng: np.random.Generator,
                   max_attempts: int = 100,
                   allow_duplicates: bool = True) -> np.ndarray:
    """
    Draw ``k`` centroids from ``samples``, distinct by value where possible.

    Raises:
        InsufficientDistinctColorsError: If a distinct centroid cannot be
            found within ``max_attempts`` draws and duplicates are not allowed
    """
    n = len(samples)
    centroids = np.empty((k, samples.shape[1]), dtype=np.float64)

    for slot in range(k):
        chosen = None
        for _ in range(max_attempts):
            candidate = samples[rng.integers(n)]
            if not np.any(np.all(centroids[:slot] == candidate, axis=1)):
                chosen = candidate
                break

        if chosen is None:
            if not allow_duplicates:
                raise InsufficientDistinctColorsError(k, slot)
            chosen = samples[rng.integers(n)]
            logger.warning(f"No distinct color found for centroid {slot} after "
                           f"{max_attempts} draws, accepting a duplicate")

        centroids[slot] = chosen

    return centroids


def assign_clusters(samples: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """Index of the nearest centroid per sample; ties go to the lowest index."""
    diff = samples[:, np.newaxis, :] - centroids[np.newaxis, :, :]
    distances = np.sqrt(np.sum(diff ** 2, axis=2))
    return np.argmin(distances, axis=1)


def update_centroids(samples: np.ndarray, labels: np.ndarray, k: int,
                     rng: np.random.Generator):
    """
    Recompute each centroid as the mean of its members.

    Returns:
        Tuple of (new centroids, whether any empty cluster was reseeded)
    """
    centroids = np.empty((k, samples.shape[1]), dtype=np.float64)
    reseeded = False

    for i in range(k):
        members = samples[labels == i]
        if len(members) == 0:
            # Dead cluster: restart from a random sample of the full population
            centroids[i] = samples[rng.integers(len(samples))]
            reseeded = True
            logger.debug(f"Reseeded empty cluster {i}")
        else:
            centroids[i] = members.mean(axis=0)

    return centroids, reseeded


def cluster_colors(samples: np.ndarray, k: int,
                   rng: Optional[np.random.Generator] = None,
                   kmeans_config: Optional[KMeansConfig] = None) -> KMeansResult:
    """
    Partition color samples into ``k`` clusters.

    Iterates assignment and update until the centroids stop moving exactly,
    or the assignment repeats.

    Args:
        samples: Float array (N, 3), possibly dithered
        k: Number of clusters
        rng: Random source for initialization and reseeding
        kmeans_config: Iteration and initialization bounds

    Returns:
        KMeansResult with real-valued centroids in stable slot order

    Raises:
        InvalidInputError: If there are no samples
        InsufficientDistinctColorsError: See ``init_centroids``
        ClusteringDidNotConvergeError: If ``max_iter`` is reached
    """
    if kmeans_config is None:
        kmeans_config = KMeansConfig()
    if rng is None:
        rng = np.random.default_rng()

    samples = np.asarray(samples, dtype=np.float64)
    if samples.ndim != 2 or samples.shape[0] == 0:
        raise InvalidInputError(f"Cannot cluster empty sample set, got shape {samples.shape}")

    logger.debug(f"Starting k-means with k={k}, {len(samples)} samples")

    centroids = init_centroids(
        samples, k, rng,
        max_attempts=kmeans_config.init_max_attempts,
        allow_duplicates=kmeans_config.allow_duplicate_centroids
    )

    previous_labels = None
    reseeded_iterations = 0
    for iteration in range(1, kmeans_config.max_iter + 1):
        labels = assign_clusters(samples, centroids)
        new_centroids, reseeded = update_centroids(samples, labels, k, rng)
        if reseeded:
            reseeded_iterations += 1

        unchanged = np.array_equal(new_centroids, centroids)
        # An unchanged assignment is a fixed point even if empty slots were
        # reseeded: those reseeds captured no samples last round either
        stable = previous_labels is not None and np.array_equal(labels, previous_labels)

        centroids = new_centroids
        previous_labels = labels

        if unchanged or stable:
            logger.debug(f"K-means converged after {iteration} iterations "
                         f"({reseeded_iterations} with reseeded clusters)")
            return KMeansResult(centroids=centroids, labels=labels,
                                samples=samples, iterations=iteration,
                                reseeded_iterations=reseeded_iterations)

    logger.error(f"K-means did not converge within {kmeans_config.max_iter} iterations")
    raise ClusteringDidNotConvergeError(kmeans_config.max_iter)
