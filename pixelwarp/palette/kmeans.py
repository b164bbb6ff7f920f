# pixelwarp/palette/kmeans.py
from __future__ import annotations

"""
Fixed-iteration k-means over RGB samples.

Seeding draws `k` samples uniformly (with replacement) from the input, so
two runs only agree when they share a seed or an injected Generator. There is
no convergence test: exactly `iterations` assign/update rounds run, then one
final assignment counts members and empty centroids are dropped.
"""

from typing import List, Optional

import numpy as np

from ..constants import KMEANS_ITERATIONS
from ..core_types import ClusterCentroid, U8Samples, as_samples, round_half_up
from ..errors import EmptySampleSetError
from ..utils import debug_log

# Bounds the (rows, k, 3) distance temporary.
_ASSIGN_CHUNK_ROWS = 65536


def nearest_centroid_indices(data: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """
    Index of the nearest centroid (Euclidean, RGB) for every sample row.
    Ties resolve to the lowest centroid index.
    """
    data_i = data.astype(np.int64, copy=False)
    cents = centroids.astype(np.int64, copy=False)
    labels = np.empty(data_i.shape[0], dtype=np.intp)
    for start in range(0, data_i.shape[0], _ASSIGN_CHUNK_ROWS):
        block = data_i[start : start + _ASSIGN_CHUNK_ROWS]
        diff = block[:, None, :] - cents[None, :, :]
        dist2 = np.sum(diff * diff, axis=2)
        labels[start : start + block.shape[0]] = np.argmin(dist2, axis=1)
    return labels


def _channel_sums(data: np.ndarray, labels: np.ndarray, k: int) -> np.ndarray:
    return np.stack(
        [
            np.bincount(labels, weights=data[:, ch].astype(np.float64), minlength=k)
            for ch in range(3)
        ],
        axis=1,
    )


def kmeans_clusters(
    samples: U8Samples,
    k: int,
    rng: Optional[np.random.Generator] = None,
    iterations: int = KMEANS_ITERATIONS,
    debug: bool = False,
) -> List[ClusterCentroid]:
    """
    Cluster samples into at most k representative colours.

    Args:
      samples: (N,3) uint8 RGB rows (or anything as_samples accepts)
      k: number of centroids to seed
      rng: random source for seeding; a fresh unseeded Generator when None
      iterations: fixed number of assign/update rounds
      debug: log per-iteration centroid movement

    Returns:
      Surviving centroids in seed order, each with its member count.
    """
    data = as_samples(samples)
    n = int(data.shape[0])
    if n == 0:
        raise EmptySampleSetError("k-means needs at least one sample")
    if k < 1:
        raise ValueError(f"k must be >= 1, got {k}")

    rng = rng if rng is not None else np.random.default_rng()
    seeds = rng.integers(0, n, size=int(k))
    centroids = data[seeds].astype(np.int64)

    for iteration in range(int(iterations)):
        labels = nearest_centroid_indices(data, centroids)
        counts = np.bincount(labels, minlength=k)
        nonempty = counts > 0
        means = _channel_sums(data, labels, k)[nonempty] / counts[nonempty][:, None]

        updated = centroids.copy()
        updated[nonempty] = round_half_up(means).astype(np.int64)
        if debug:
            moved = int(np.count_nonzero(np.any(updated != centroids, axis=1)))
            debug_log(
                f"kmeans iter {iteration + 1}/{iterations}: moved={moved} "
                f"empty={int(k - np.count_nonzero(nonempty))}"
            )
        centroids = updated

    labels = nearest_centroid_indices(data, centroids)
    counts = np.bincount(labels, minlength=k)
    return [
        ClusterCentroid(int(r), int(g), int(b), int(c))
        for (r, g, b), c in zip(centroids.tolist(), counts.tolist())
        if c > 0
    ]


__all__ = ["nearest_centroid_indices", "kmeans_clusters"]
