# pixelwarp/palette/extract.py
from __future__ import annotations

"""
Palette extraction: cluster colour samples and rank them by share.

Exports:
- PaletteOptions: count / method / format / seed record with defaults
- PaletteEntry: one ranked colour
- samples_from_buffer(buffer, skip_transparent=False) -> (N,3) uint8
- cluster_samples(samples, count, method, rng=None, debug=False)
- extract_palette(samples, options=None, rng=None, debug=False)

Notes:
- "octree" is accepted and runs k-means; there is no octree quantizer.
- Percentages are weight / total samples * 100. K-means drops empty
  centroids, so the list can be shorter than `count`.
"""

from dataclasses import dataclass
from typing import Dict, List, Literal, Optional, Tuple, Union

import numpy as np

from ..colour_convert import COLOUR_FORMATS, ColourFormat, format_colour
from ..constants import (
    DEFAULT_PALETTE_COUNT,
    DEFAULT_PALETTE_FORMAT,
    DEFAULT_PALETTE_METHOD,
)
from ..core_types import (
    CHANNELS,
    ClusterCentroid,
    PixelBuffer,
    RGBTuple,
    U8Samples,
    as_samples,
)
from ..errors import EmptySampleSetError
from ..utils import debug_log
from .kmeans import kmeans_clusters
from .median_cut import median_cut_clusters

PaletteMethod = Literal["kmeans", "median-cut", "octree"]
PALETTE_METHODS: Tuple[str, ...] = ("kmeans", "median-cut", "octree")


@dataclass(frozen=True)
class PaletteOptions:
    """Palette extraction parameters; seed=None means non-deterministic seeding."""

    count: int = DEFAULT_PALETTE_COUNT
    method: PaletteMethod = DEFAULT_PALETTE_METHOD  # type: ignore[assignment]
    format: ColourFormat = DEFAULT_PALETTE_FORMAT  # type: ignore[assignment]
    seed: Optional[int] = None

    def validate(self) -> None:
        if int(self.count) < 1:
            raise ValueError(f"count must be >= 1, got {self.count}")
        if self.method not in PALETTE_METHODS:
            raise ValueError(
                f"unknown palette method {self.method!r}; expected one of {PALETTE_METHODS}"
            )
        if self.format not in COLOUR_FORMATS:
            raise ValueError(
                f"unknown colour format {self.format!r}; expected one of {COLOUR_FORMATS}"
            )


@dataclass(frozen=True)
class PaletteEntry:
    """Ranked palette colour."""

    color: str
    percentage: float
    rgb: RGBTuple
    count: int

    def to_dict(self) -> Dict[str, Union[str, float]]:
        return {"color": self.color, "percentage": self.percentage}


def samples_from_buffer(buffer: PixelBuffer, skip_transparent: bool = False) -> U8Samples:
    """
    RGB rows of every pixel, alpha dropped.

    With skip_transparent=True, pixels whose alpha is 0 are left out.
    """
    rgba = buffer.pixels.reshape(-1, CHANNELS)
    if skip_transparent:
        rgba = rgba[rgba[:, 3] > 0]
    return np.ascontiguousarray(rgba[:, :3])


def cluster_samples(
    samples: U8Samples,
    count: int,
    method: PaletteMethod = "kmeans",
    rng: Optional[np.random.Generator] = None,
    debug: bool = False,
) -> List[ClusterCentroid]:
    """Run the clustering strategy named by method."""
    if method == "median-cut":
        return median_cut_clusters(samples, count, debug=debug)
    if method in ("kmeans", "octree"):
        if method == "octree" and debug:
            debug_log("octree requested; running k-means")
        return kmeans_clusters(samples, count, rng=rng, debug=debug)
    raise ValueError(
        f"unknown palette method {method!r}; expected one of {PALETTE_METHODS}"
    )


def extract_palette(
    samples: U8Samples,
    options: Optional[PaletteOptions] = None,
    rng: Optional[np.random.Generator] = None,
    debug: bool = False,
) -> List[PaletteEntry]:
    """
    Representative colours of samples, sorted by descending percentage.

    Args:
      samples: (N,3) RGB rows, a list of ColorSample, or similar
      options: PaletteOptions; defaults to count=10, kmeans, hex
      rng: overrides options.seed when given
      debug: log clustering progress

    Raises:
      EmptySampleSetError when samples is empty.
      ValueError for an invalid count, method or format.
    """
    opts = options if options is not None else PaletteOptions()
    opts.validate()

    data = as_samples(samples)
    total = int(data.shape[0])
    if total == 0:
        raise EmptySampleSetError("cannot extract a palette from zero samples")

    if rng is None:
        rng = np.random.default_rng(opts.seed)
    centroids = cluster_samples(data, int(opts.count), opts.method, rng=rng, debug=debug)

    entries = [
        PaletteEntry(
            color=format_colour(c.rgb, opts.format),
            percentage=c.count / total * 100.0,
            rgb=c.rgb,
            count=c.count,
        )
        for c in centroids
    ]
    entries.sort(key=lambda e: -e.percentage)
    if debug:
        debug_log(
            f"palette: samples={total:,} colours={len(entries)} method={opts.method}"
        )
    return entries


__all__ = [
    "PaletteMethod",
    "PALETTE_METHODS",
    "PaletteOptions",
    "PaletteEntry",
    "samples_from_buffer",
    "cluster_samples",
    "extract_palette",
]
