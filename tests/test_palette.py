import numpy as np
import pytest

from pixelwarp.core_types import ColorSample, PixelBuffer
from pixelwarp.errors import EmptySampleSetError
from pixelwarp.palette import (
    PaletteOptions,
    extract_palette,
    kmeans_clusters,
    median_cut_clusters,
    samples_from_buffer,
    widest_channel,
)


class FixedSeeds:
    """Stand-in Generator that always seeds from the given sample indices."""

    def __init__(self, indices):
        self.indices = np.asarray(indices)

    def integers(self, low, high, size):
        return self.indices[:size]


def random_samples(n, seed=3):
    return np.random.default_rng(seed).integers(0, 256, size=(n, 3), dtype=np.uint8)


def test_uniform_red_collapses_to_one_colour():
    samples = [ColorSample(255, 0, 0)] * 100
    palette = extract_palette(samples, PaletteOptions(count=3, method="kmeans", seed=0))
    assert len(palette) == 1
    assert palette[0].color == "#ff0000"
    assert palette[0].percentage == pytest.approx(100.0)
    assert palette[0].count == 100


def test_median_cut_two_extremes_split_evenly():
    samples = [(0, 0, 0), (255, 255, 255)]
    palette = extract_palette(samples, PaletteOptions(count=2, method="median-cut"))
    assert sorted(e.color for e in palette) == ["#000000", "#ffffff"]
    assert [e.count for e in palette] == [1, 1]
    assert [e.percentage for e in palette] == [50.0, 50.0]


@pytest.mark.parametrize("count,cap", [(1, 1), (3, 3), (8, 8), (20, 8)])
def test_median_cut_bucket_limits(count, cap):
    buckets = median_cut_clusters(random_samples(500), count)
    assert 1 <= len(buckets) <= cap
    assert sum(b.count for b in buckets) == 500


def test_median_cut_stops_when_buckets_cannot_split():
    buckets = median_cut_clusters([(9, 9, 9)], 5)
    assert buckets == [(9, 9, 9, 1)]


def test_median_cut_splits_on_widest_channel():
    samples = [(0, 0, 0), (0, 0, 0), (0, 200, 0), (0, 210, 0)]
    buckets = median_cut_clusters(samples, 2)
    assert [tuple(b) for b in buckets] == [(0, 0, 0, 2), (0, 205, 0, 2)]


def test_widest_channel_tie_break_order():
    assert widest_channel(np.array([[0, 0, 0], [10, 10, 5]])) == 0
    assert widest_channel(np.array([[0, 0, 0], [5, 10, 10]])) == 1
    assert widest_channel(np.array([[0, 0, 0], [5, 6, 10]])) == 2


def test_kmeans_counts_sum_to_sample_count():
    centroids = kmeans_clusters(random_samples(300), 5, rng=np.random.default_rng(1))
    assert 1 <= len(centroids) <= 5
    assert sum(c.count for c in centroids) == 300
    assert all(c.count > 0 for c in centroids)


def test_kmeans_with_pinned_seeds():
    samples = [(0, 0, 0), (10, 0, 0), (250, 250, 250), (240, 250, 250)]
    centroids = kmeans_clusters(samples, 2, rng=FixedSeeds([0, 2]))
    assert centroids == [(5, 0, 0, 2), (245, 250, 250, 2)]


def test_same_seed_is_reproducible():
    samples = random_samples(400, seed=11)
    opts = PaletteOptions(count=6, seed=42)
    assert extract_palette(samples, opts) == extract_palette(samples, opts)


def test_octree_is_kmeans():
    samples = random_samples(250, seed=5)
    km = extract_palette(samples, PaletteOptions(count=4, method="kmeans", seed=7))
    oc = extract_palette(samples, PaletteOptions(count=4, method="octree", seed=7))
    assert km == oc


def test_palette_sorted_and_bounded():
    palette = extract_palette(random_samples(600, seed=9), PaletteOptions(count=8, seed=2))
    percentages = [e.percentage for e in palette]
    assert percentages == sorted(percentages, reverse=True)
    assert sum(percentages) <= 100.0 + 1e-9


def test_output_formats():
    samples = [(255, 0, 0)] * 2
    rgb = extract_palette(samples, PaletteOptions(count=1, method="median-cut", format="rgb"))
    hsl = extract_palette(samples, PaletteOptions(count=1, method="median-cut", format="hsl"))
    assert rgb[0].color == "rgb(255, 0, 0)"
    assert hsl[0].color == "hsl(0, 100%, 50%)"
    assert rgb[0].to_dict() == {"color": "rgb(255, 0, 0)", "percentage": 100.0}


def test_empty_samples_raise():
    with pytest.raises(EmptySampleSetError):
        extract_palette([])


@pytest.mark.parametrize(
    "opts",
    [
        PaletteOptions(method="popularity"),
        PaletteOptions(format="cmyk"),
        PaletteOptions(count=0),
    ],
)
def test_invalid_options_raise(opts):
    with pytest.raises(ValueError):
        extract_palette([(1, 2, 3)], opts)


def test_samples_from_buffer_drops_alpha():
    buf = PixelBuffer(2, 1, [10, 20, 30, 0, 40, 50, 60, 255])
    assert samples_from_buffer(buf).tolist() == [[10, 20, 30], [40, 50, 60]]
    assert samples_from_buffer(buf, skip_transparent=True).tolist() == [[40, 50, 60]]


def test_median_cut_splits_first_bucket_on_size_tie():
    samples = [(250, 0, 0), (0, 0, 0), (200, 0, 0), (10, 0, 0)]
    # 4 -> [0, 10] + [200, 250]; the 2/2 tie splits the first (darker) bucket
    buckets = median_cut_clusters(samples, 3)
    assert [tuple(b) for b in buckets] == [(0, 0, 0, 1), (10, 0, 0, 1), (225, 0, 0, 2)]
