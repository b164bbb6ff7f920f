# pixelwarp/core_types.py
from __future__ import annotations

"""
Core type aliases, small value objects, and lightweight helpers.
"""

from dataclasses import dataclass
from typing import NamedTuple, Optional, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from .errors import BufferShapeError

# Basic aliases

RGBTuple = Tuple[int, int, int]
RGBATuple = Tuple[int, int, int, int]
HexStr = str

U8Pixels = NDArray[np.uint8]  # flat (W*H*4,)
U8Image = NDArray[np.uint8]  # (H, W, 4)
U8Samples = NDArray[np.uint8]  # (N, 3)

# Row-major 3x3 projective matrix, h[8] normally 1.
Homography = Tuple[float, float, float, float, float, float, float, float, float]

CHANNELS = 4

# Value objects


@dataclass(frozen=True)
class PointF:
    """Point in continuous pixel coordinates (top-left origin)."""

    x: float
    y: float


class ColorSample(NamedTuple):
    r: int
    g: int
    b: int


class ClusterCentroid(NamedTuple):
    """Representative colour of a cluster and how many samples it owns."""

    r: int
    g: int
    b: int
    count: int

    @property
    def rgb(self) -> RGBTuple:
        return (self.r, self.g, self.b)


# Grid rows are indexed [row][col]; None marks a cell without a control point.
MeshControlGrid = Sequence[Sequence[Optional[PointF]]]


@dataclass(frozen=True, eq=False)
class PixelBuffer:
    """
    RGBA8 image data, row-major, top-left origin.

    `pixels` is always a flat uint8 array of length width*height*4 in R,G,B,A
    order. Construction validates and coerces; engines hand back new buffers.
    """

    width: int
    height: int
    pixels: U8Pixels

    def __post_init__(self) -> None:
        width = int(self.width)
        height = int(self.height)
        if width < 0 or height < 0:
            raise BufferShapeError(f"negative buffer size {width}x{height}")

        raw = self.pixels
        if isinstance(raw, (bytes, bytearray, memoryview)):
            flat = np.frombuffer(raw, dtype=np.uint8).copy()
        elif isinstance(raw, np.ndarray) and raw.dtype == np.uint8:
            flat = np.ascontiguousarray(raw).reshape(-1)
        else:
            wide = np.asarray(raw, dtype=np.int64).reshape(-1)
            if wide.size and (int(wide.min()) < 0 or int(wide.max()) > 255):
                raise BufferShapeError("pixel values must lie in 0..255")
            flat = wide.astype(np.uint8)

        expected = width * height * CHANNELS
        if flat.size != expected:
            raise BufferShapeError(
                f"expected {expected} samples for {width}x{height}, got {flat.size}"
            )
        object.__setattr__(self, "width", width)
        object.__setattr__(self, "height", height)
        object.__setattr__(self, "pixels", flat)

    # Constructors

    @classmethod
    def blank(cls, width: int, height: int) -> "PixelBuffer":
        """Fully transparent buffer."""
        return cls(width, height, np.zeros(width * height * CHANNELS, dtype=np.uint8))

    @classmethod
    def from_array(cls, image: np.ndarray) -> "PixelBuffer":
        """Build from an (H,W,4) array; (H,W,3) input gets opaque alpha."""
        arr = np.asarray(image)
        if arr.ndim != 3 or arr.shape[-1] not in (3, 4):
            raise BufferShapeError(f"expected (H,W,3/4) array, got {arr.shape}")
        height, width = int(arr.shape[0]), int(arr.shape[1])
        if arr.shape[-1] == 3:
            rgba = np.full((height, width, CHANNELS), 255, dtype=np.uint8)
            rgba[..., :3] = arr
            arr = rgba
        return cls(width, height, np.array(arr, dtype=np.uint8).reshape(-1))

    # Views

    def as_array(self) -> U8Image:
        """(H,W,4) view sharing memory with `pixels`."""
        return self.pixels.reshape(self.height, self.width, CHANNELS)

    def copy(self) -> "PixelBuffer":
        return PixelBuffer(self.width, self.height, self.pixels.copy())

    def pixel(self, x: int, y: int) -> RGBATuple:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height}")
        i = (y * self.width + x) * CHANNELS
        r, g, b, a = self.pixels[i : i + CHANNELS].tolist()
        return (r, g, b, a)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return (
            self.width == other.width
            and self.height == other.height
            and bool(np.array_equal(self.pixels, other.pixels))
        )

    def __repr__(self) -> str:
        return f"PixelBuffer(width={self.width}, height={self.height})"


# Small helpers


def clamp_value(value: float, lo: float, hi: float) -> float:
    """Clamp value to [lo, hi]."""
    return lo if value < lo else hi if value > hi else value


def round_half_up(values: Union[float, np.ndarray]) -> np.ndarray:
    """Round .5 towards +inf (matches canvas-style Math.round). Returns float64."""
    return np.floor(np.asarray(values, dtype=np.float64) + 0.5)


def as_samples(samples: Union[Sequence[Sequence[int]], np.ndarray]) -> U8Samples:
    """
    Coerce ColorSample rows / an (N,3+) array into an (N,3) uint8 array.

    Non-uint8 input must hold whole numbers in 0..255; anything else raises
    ValueError rather than wrapping on the cast.
    """
    arr = np.asarray(samples)
    if arr.size == 0:
        return np.zeros((0, 3), dtype=np.uint8)
    if arr.ndim != 2 or arr.shape[1] < 3:
        raise ValueError(f"expected (N,3) colour samples, got shape {arr.shape}")
    rgb = arr[:, :3]
    if rgb.dtype == np.uint8:
        return np.ascontiguousarray(rgb)

    if not (np.issubdtype(rgb.dtype, np.integer) or np.issubdtype(rgb.dtype, np.floating)):
        raise ValueError(f"colour samples must be numeric, got dtype {rgb.dtype}")
    if np.issubdtype(rgb.dtype, np.floating):
        if not np.all(np.isfinite(rgb)) or not np.array_equal(rgb, np.floor(rgb)):
            raise ValueError("colour samples must be whole numbers")
    wide = rgb.astype(np.int64)
    if int(wide.min()) < 0 or int(wide.max()) > 255:
        raise ValueError("colour samples must lie in 0..255")
    return np.ascontiguousarray(wide, dtype=np.uint8)


__all__ = [
    # aliases / types
    "RGBTuple",
    "RGBATuple",
    "HexStr",
    "U8Pixels",
    "U8Image",
    "U8Samples",
    "Homography",
    "MeshControlGrid",
    "CHANNELS",
    # value objects
    "PointF",
    "ColorSample",
    "ClusterCentroid",
    "PixelBuffer",
    # helpers
    "clamp_value",
    "round_half_up",
    "as_samples",
]
