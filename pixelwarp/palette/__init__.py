"""Colour-palette extraction: k-means and median-cut quantizers."""

from .extract import (
    PALETTE_METHODS,
    PaletteEntry,
    PaletteMethod,
    PaletteOptions,
    cluster_samples,
    extract_palette,
    samples_from_buffer,
)
from .kmeans import kmeans_clusters, nearest_centroid_indices
from .median_cut import median_cut_clusters, widest_channel

__all__ = [
    "PALETTE_METHODS",
    "PaletteEntry",
    "PaletteMethod",
    "PaletteOptions",
    "cluster_samples",
    "extract_palette",
    "samples_from_buffer",
    "kmeans_clusters",
    "nearest_centroid_indices",
    "median_cut_clusters",
    "widest_channel",
]
