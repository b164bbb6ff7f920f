# pixelwarp/palette/median_cut.py
from __future__ import annotations

"""
Median-cut bucketing over RGB samples.

Start with one bucket holding every sample; repeatedly take the most
populous bucket, sort it along its widest channel and split it at the median
index. Stops at min(count, MEDIAN_CUT_MAX_BUCKETS) buckets or when the
largest bucket cannot be split.
"""

from typing import List

import numpy as np

from ..constants import MEDIAN_CUT_MAX_BUCKETS
from ..core_types import ClusterCentroid, U8Samples, as_samples, round_half_up
from ..errors import EmptySampleSetError
from ..utils import debug_log

_CHANNEL_NAMES = ("R", "G", "B")


def widest_channel(bucket: np.ndarray) -> int:
    """Channel (0=R, 1=G, 2=B) with the largest max-min range; ties prefer R, then G."""
    spans = bucket.max(axis=0).astype(np.int64) - bucket.min(axis=0).astype(np.int64)
    r, g, b = (int(v) for v in spans[:3])
    if r >= g and r >= b:
        return 0
    if g >= b:
        return 1
    return 2


def median_cut_clusters(
    samples: U8Samples,
    count: int,
    max_buckets: int = MEDIAN_CUT_MAX_BUCKETS,
    debug: bool = False,
) -> List[ClusterCentroid]:
    """
    Split samples into at most min(count, max_buckets) buckets.

    Returns one centroid per bucket: the half-up rounded channel mean, weighted
    by the bucket's sample count. Never returns an empty list.
    """
    data = as_samples(samples)
    if data.shape[0] == 0:
        raise EmptySampleSetError("median-cut needs at least one sample")
    if count < 1:
        raise ValueError(f"count must be >= 1, got {count}")

    buckets: List[np.ndarray] = [data]
    target = min(int(count), int(max_buckets))

    while len(buckets) < target:
        largest = max(range(len(buckets)), key=lambda i: buckets[i].shape[0])
        bucket = buckets[largest]
        if bucket.shape[0] <= 1:
            break

        channel = widest_channel(bucket)
        ordered = bucket[np.argsort(bucket[:, channel], kind="stable")]
        median = ordered.shape[0] // 2
        buckets[largest : largest + 1] = [ordered[:median], ordered[median:]]
        if debug:
            debug_log(
                f"median-cut split bucket {largest} on {_CHANNEL_NAMES[channel]}: "
                f"{median} + {ordered.shape[0] - median}"
            )

    centroids: List[ClusterCentroid] = []
    for bucket in buckets:
        r, g, b = round_half_up(bucket.astype(np.float64).mean(axis=0)).astype(int).tolist()
        centroids.append(ClusterCentroid(r, g, b, int(bucket.shape[0])))
    return centroids


__all__ = ["widest_channel", "median_cut_clusters"]
