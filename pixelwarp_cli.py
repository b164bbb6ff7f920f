#!/usr/bin/env python3
"""
pixelwarp_cli.py
Warp images and extract colour palettes from the command line.

Usage:
  python pixelwarp_cli.py palette SRC [--count N] [--method kmeans|median-cut|octree] [--format hex|rgb|hsl] [--seed S] [--json] [--jobs J]
  python pixelwarp_cli.py perspective SRC OUT --points x,y x,y x,y x,y [--workers W]
  python pixelwarp_cli.py bulge SRC OUT --center x,y --radius R --intensity I
  python pixelwarp_cli.py mesh SRC OUT --grid 3x3 --control grid.json
  python pixelwarp_cli.py mask SRC MASK OUT [--mode alpha|luminance|inverse]

Commands:
  palette     : ranked dominant colours of an image, or of every image in a folder.
  perspective : map the image onto a quadrilateral (bounding box is the output size).
  bulge       : radial bulge (intensity > 0) or pinch (intensity < 0).
  mesh        : grid warp from a JSON [row][col] list of [x, y] control points (or null).
  mask        : scale alpha by another image's alpha / luminance / inverse alpha.

Output:
  Warps always write PNG. Palette reports go to stdout.

Notes:
  Decoding, encoding and resizing are Pillow's job (pixelwarp.image_io);
  the pixel work is pixelwarp's engines.
"""

from __future__ import annotations

import argparse
import json
import math
import os
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Optional, Sequence

from PIL import Image

from pixelwarp.constants import (
    DEFAULT_MESH_GRID,
    DEFAULT_PALETTE_COUNT,
    PALETTE_SAMPLE_MAX_SIDE,
)
from pixelwarp.core_types import PixelBuffer, PointF, clamp_value
from pixelwarp.errors import InvalidGridError, PixelWarpError
from pixelwarp.geometry import bulge, mesh_warp, perspective_distort
from pixelwarp.image_io import (
    is_image_file,
    load_buffer,
    palette_samples_from_image,
    resize_mask_to,
    save_buffer,
)
from pixelwarp.mask import MASK_MODES, apply_mask
from pixelwarp.palette import PALETTE_METHODS, PaletteOptions, extract_palette
from pixelwarp.colour_convert import COLOUR_FORMATS
from pixelwarp.utils import (
    debug_log,
    enable_line_buffered_stdout,
    error,
    format_log_line,
    format_percentage,
    format_seconds_compact,
    key_value_pairs_to_string,
    log,
    print_banner,
    print_config_line,
    warn,
)

IMAGE_EXTS = {".png", ".jpg", ".jpeg", ".webp", ".gif", ".bmp"}

# CLI args & small helpers


def _default_workers() -> int:
    """Leave a few cores free for the system; returns a sensible worker count."""
    n = os.cpu_count() or 4
    reserve = 1 if n <= 6 else 2 if n <= 12 else 3 if n <= 18 else 4
    return max(1, n - reserve)


def parse_point(text: str) -> PointF:
    """'x,y' -> PointF (argparse type)."""
    parts = text.split(",")
    if len(parts) != 2:
        raise argparse.ArgumentTypeError(f"expected x,y but got {text!r}")
    try:
        return PointF(float(parts[0]), float(parts[1]))
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected numbers in {text!r}") from None


def parse_grid(text: str) -> tuple:
    """'GXxGY' -> (gx, gy) (argparse type)."""
    parts = text.lower().split("x")
    if len(parts) != 2 or not all(p.isdigit() for p in parts):
        raise argparse.ArgumentTypeError(f"expected GXxGY (e.g. 3x3) but got {text!r}")
    gx, gy = int(parts[0]), int(parts[1])
    if gx < 1 or gy < 1:
        raise argparse.ArgumentTypeError("grid dimensions must be >= 1")
    return gx, gy


def parse_positive_int(text: str) -> int:
    """Integer >= 1 (argparse type)."""
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError(f"expected an integer >= 1, got {value}")
    return value


def parse_intensity(text: str) -> float:
    """Float in [-1, 1] (argparse type)."""
    value = float(text)
    if clamp_value(value, -1.0, 1.0) != value:
        raise argparse.ArgumentTypeError(f"intensity must be in [-1, 1], got {value}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pixelwarp",
        description="Pixel-space warps and colour palettes for RGBA images.",
    )
    parser.add_argument("--debug", action="store_true", help="Verbose details")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("palette", help="Extract dominant colours")
    p.add_argument("src", type=Path, help="Input image or folder")
    p.add_argument(
        "--count", type=parse_positive_int, default=DEFAULT_PALETTE_COUNT, help="Number of colours"
    )
    p.add_argument("--method", choices=list(PALETTE_METHODS), default="kmeans")
    p.add_argument("--format", choices=list(COLOUR_FORMATS), default="hex")
    p.add_argument("--seed", type=int, default=None, help="Pin k-means seeding")
    p.add_argument(
        "--max-side",
        type=int,
        default=PALETTE_SAMPLE_MAX_SIDE,
        help="Downsample so both sides <= this before sampling",
    )
    p.add_argument("--json", action="store_true", help="Print JSON instead of a table")
    p.add_argument("--jobs", type=int, default=2, help="Files processed in parallel")

    p = sub.add_parser("perspective", help="Perspective warp onto 4 points")
    p.add_argument("src", type=Path)
    p.add_argument("out", type=Path)
    p.add_argument(
        "--points",
        type=parse_point,
        nargs=4,
        required=True,
        metavar="X,Y",
        help="Target corners: top-left top-right bottom-right bottom-left",
    )
    p.add_argument(
        "--workers", type=int, default=_default_workers(), help="Row threads"
    )

    p = sub.add_parser("bulge", help="Radial bulge / pinch")
    p.add_argument("src", type=Path)
    p.add_argument("out", type=Path)
    p.add_argument("--center", type=parse_point, default=None, metavar="X,Y",
                   help="Defaults to the image centre")
    p.add_argument("--radius", type=float, default=None,
                   help="Defaults to half the shorter side")
    p.add_argument("--intensity", type=parse_intensity, default=0.5)

    p = sub.add_parser("mesh", help="Grid warp from control points")
    p.add_argument("src", type=Path)
    p.add_argument("out", type=Path)
    p.add_argument(
        "--grid",
        type=parse_grid,
        default=DEFAULT_MESH_GRID,
        metavar="GXxGY",
    )
    p.add_argument("--control", type=Path, required=True,
                   help="JSON [row][col] list of [x, y] or null")

    p = sub.add_parser("mask", help="Apply a mask to the alpha channel")
    p.add_argument("src", type=Path)
    p.add_argument("mask", type=Path)
    p.add_argument("out", type=Path)
    p.add_argument("--mode", choices=list(MASK_MODES), default="alpha")
    return parser


def parse_cli_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def _is_coordinate(value: object) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def load_control_grid(path: Path) -> List[List[Optional[PointF]]]:
    """Read a [row][col] JSON grid of [x, y] pairs or nulls."""
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise InvalidGridError(f"{path.name}: not valid JSON ({e})") from e
    if not isinstance(raw, list):
        raise InvalidGridError(f"{path.name}: expected a list of rows")

    grid: List[List[Optional[PointF]]] = []
    for r, row in enumerate(raw):
        if not isinstance(row, list):
            raise InvalidGridError(f"{path.name}: row {r} is not a list")
        cells: List[Optional[PointF]] = []
        for c, cell in enumerate(row):
            if cell is None:
                cells.append(None)
            elif (
                isinstance(cell, list)
                and len(cell) == 2
                and all(_is_coordinate(v) for v in cell)
            ):
                cells.append(PointF(float(cell[0]), float(cell[1])))
            else:
                raise InvalidGridError(f"{path.name}: bad control point at [{r}][{c}]")
        grid.append(cells)
    return grid


# Palette


def palette_report(
    path: Path, options: PaletteOptions, max_side: int, as_json: bool, debug: bool
) -> str:
    """
    Build the palette report for one image as text.

    Returned rather than printed so folder mode can run files in parallel
    and still print reports in order.
    """
    t_start = time.perf_counter()
    with Image.open(path) as im:
        samples, (sw, sh) = palette_samples_from_image(im, max_side=max_side)
    entries = extract_palette(samples, options)
    elapsed = time.perf_counter() - t_start

    if as_json:
        return json.dumps(
            {"file": path.name, "palette": [e.to_dict() for e in entries]}
        ) + "\n"

    lines = [f"\n=== {path.name} ==="]
    if debug:
        stats = key_value_pairs_to_string(
            [("Sampled", f"{sw}x{sh}"), ("Samples", int(samples.shape[0])),
             ("Time", format_seconds_compact(elapsed))]
        )
        lines.append(format_log_line("debug", stats))
    for e in entries:
        lines.append(f"  {e.color}  {format_percentage(e.percentage)}")
    return "\n".join(lines) + "\n"


def run_palette(args: argparse.Namespace) -> int:
    options = PaletteOptions(
        count=args.count, method=args.method, format=args.format, seed=args.seed
    )
    options.validate()
    if not args.json:
        print_config_line(
            "palette",
            [
                ("Count", args.count),
                ("Method", args.method),
                ("Format", args.format),
                ("Seed", args.seed if args.seed is not None else "-"),
            ],
            debug=args.debug,
        )

    src: Path = args.src
    if src.is_dir():
        files = sorted(
            (
                p
                for p in src.iterdir()
                if p.is_file() and p.suffix.lower() in IMAGE_EXTS and is_image_file(p)
            ),
            key=lambda p: p.name.lower(),
        )
        if args.debug:
            debug_log(key_value_pairs_to_string([("Images", len(files)), ("Jobs", args.jobs)]))
        if args.jobs <= 1:
            blocks = [
                palette_report(p, options, args.max_side, args.json, args.debug)
                for p in files
            ]
        else:
            with ThreadPoolExecutor(max_workers=args.jobs) as ex:
                futures = [
                    ex.submit(palette_report, p, options, args.max_side, args.json, args.debug)
                    for p in files
                ]
                blocks = [f.result() for f in futures]
    else:
        blocks = [palette_report(src, options, args.max_side, args.json, args.debug)]

    print("".join(blocks), end="", flush=True)
    return 0


# Warps


def _finish(out_path: Path, result: PixelBuffer, t_start: float, debug: bool) -> None:
    written = save_buffer(out_path, result)
    log(f"Wrote {written.name} | size={result.width}x{result.height}")
    if debug:
        debug_log(f"Total {format_seconds_compact(time.perf_counter() - t_start)}")


def run_perspective(args: argparse.Namespace) -> int:
    t_start = time.perf_counter()
    print_banner(args.src.name)
    src = load_buffer(args.src)
    result = perspective_distort(src, args.points, workers=args.workers)
    log(f"Origin: ({result.origin.x:g}, {result.origin.y:g})")
    _finish(args.out, result.buffer, t_start, args.debug)
    return 0


def run_bulge(args: argparse.Namespace) -> int:
    t_start = time.perf_counter()
    print_banner(args.src.name)
    src = load_buffer(args.src)
    center = args.center or PointF(src.width / 2.0, src.height / 2.0)
    radius = args.radius if args.radius is not None else min(src.width, src.height) / 2.0
    if radius <= 0:
        warn(f"radius {radius:g} <= 0; output equals input")
    print_config_line(
        "bulge",
        [("Center", f"{center.x:g},{center.y:g}"), ("Radius", float(radius)),
         ("Intensity", float(args.intensity))],
        debug=args.debug,
    )
    result = bulge(src, center, radius, args.intensity)
    _finish(args.out, result, t_start, args.debug)
    return 0


def run_mesh(args: argparse.Namespace) -> int:
    t_start = time.perf_counter()
    print_banner(args.src.name)
    src = load_buffer(args.src)
    grid_x, grid_y = args.grid
    control = load_control_grid(args.control)
    result = mesh_warp(src, grid_x, grid_y, control)
    _finish(args.out, result, t_start, args.debug)
    return 0


def run_mask(args: argparse.Namespace) -> int:
    t_start = time.perf_counter()
    print_banner(args.src.name)
    primary = load_buffer(args.src)
    mask = resize_mask_to(load_buffer(args.mask), primary.width, primary.height)
    result = apply_mask(primary, mask, mode=args.mode, in_place=True)
    _finish(args.out, result, t_start, args.debug)
    return 0


COMMANDS = {
    "palette": run_palette,
    "perspective": run_perspective,
    "bulge": run_bulge,
    "mesh": run_mesh,
    "mask": run_mask,
}

# Entry point


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    CLI entry point. Returns the process exit code:
    0 on success, 2 for missing inputs, 1 when an engine rejects the input.
    """
    enable_line_buffered_stdout()
    args = parse_cli_args(argv)

    missing = [
        p for p in (getattr(args, "src", None), getattr(args, "mask", None))
        if isinstance(p, Path) and not p.exists()
    ]
    if args.command == "mesh" and not args.control.exists():
        missing.append(args.control)
    if missing:
        for p in missing:
            error(f"not found: {p}")
        return 2

    try:
        return COMMANDS[args.command](args)
    except PixelWarpError as e:
        error(f"{args.command}: {e}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
