#!/usr/bin/env python3
"""
quantize_image.py
Reduce RGBA images to a bounded palette with the Wu colour quantizer.

Usage:
  python quantize_image.py INPUT [--outdir DIR] [--colors N] [--alpha-threshold T]
      [--alpha-fader F] [--mapper lookup|nearest] [--jobs J] [--debug]

Mappers:
  lookup  : each pixel takes the colour of the box its histogram bucket fell in.
  nearest : each pixel takes the nearest palette colour (squared RGBA distance).

Input:
  Any Pillow-readable image, or a folder of them. Pixels with alpha <= T become
  fully transparent in the output.

Output:
  8-bit palette PNG with transparency, written as <stem>_wu.png next to INPUT
  (or into --outdir). One palette slot is reserved for transparent pixels.

Exit codes:
  0 all files written, 1 at least one file failed, 2 bad options or missing INPUT.
"""

from __future__ import annotations

import argparse
import io
import sys
import time
from concurrent.futures import ProcessPoolExecutor
from contextlib import redirect_stdout
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

import numpy as np

from wu_palette.constants import (
    DEFAULT_ALPHA_FADER,
    DEFAULT_ALPHA_THRESHOLD,
    DEFAULT_MAX_COLORS,
    MAX_INDEXED_COLORS,
    OPAQUE_ALPHA,
)
from wu_palette.image_io import is_image_file, load_image_rgba, save_indexed_png
from wu_palette.mapping import MAPPERS
from wu_palette.quantize import QuantizeOptions, quantize_image
from wu_palette.utils import (
    debug_log,
    enable_line_buffered_stdout,
    error,
    format_duration,
    key_value_pairs_to_string,
    log,
    palette_usage_report,
    print_banner,
    print_config_line,
    warn,
)

OUTPUT_SUFFIX = "_wu"
IMAGE_EXTS = {".png", ".jpg", ".jpeg", ".webp", ".bmp", ".gif", ".tif", ".tiff"}


@dataclass(frozen=True)
class FileJob:
    """Settings shared by every file of one run. Picklable for worker processes."""

    options: QuantizeOptions
    mapper: str = "lookup"
    debug: bool = False
    outdir: Optional[Path] = None

    def output_path(self, src_path: Path) -> Path:
        return output_path_for(src_path, self.outdir)


# Arguments


def parse_cli_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse CLI arguments.

    Returns:
      argparse.Namespace with src, outdir, colors, alpha_threshold, alpha_fader,
      mapper, jobs and debug. colors counts the transparent slot (2..256).
    """
    parser = argparse.ArgumentParser(
        prog="quantize_image",
        description="Reduce image(s) to a Wu-quantized palette PNG.",
    )
    parser.add_argument("src", type=Path, help="Input image or folder")
    parser.add_argument("--outdir", type=Path, default=None, help="Write outputs here")
    parser.add_argument(
        "--colors",
        type=int,
        default=DEFAULT_MAX_COLORS,
        help=f"Palette size including the transparent slot (2..{MAX_INDEXED_COLORS}).",
    )
    parser.add_argument(
        "--alpha-threshold",
        type=int,
        default=DEFAULT_ALPHA_THRESHOLD,
        help=f"Alpha at or below this (0..{OPAQUE_ALPHA}) is fully transparent.",
    )
    parser.add_argument(
        "--alpha-fader",
        type=int,
        default=DEFAULT_ALPHA_FADER,
        help="Translucent alpha is biased up by (alpha %% fader) when bucketing.",
    )
    parser.add_argument(
        "--mapper",
        choices=sorted(MAPPERS),
        default="lookup",
        help="How pixels pick their palette entry.",
    )
    parser.add_argument("--jobs", type=int, default=2, help="Worker processes for folders")
    parser.add_argument("--debug", action="store_true", help="Histogram and partition details")
    args = parser.parse_args(argv)
    if not 2 <= args.colors <= MAX_INDEXED_COLORS:
        parser.error(f"--colors must be in 2..{MAX_INDEXED_COLORS}")
    if args.jobs < 1:
        parser.error("--jobs must be >= 1")
    return args


def output_path_for(src_path: Path, outdir: Optional[Path]) -> Path:
    name = f"{src_path.stem}{OUTPUT_SUFFIX}.png"
    return outdir / name if outdir else src_path.with_name(name)


# One file


def _report(indices: np.ndarray, lookups, transparent_index: int) -> None:
    log("Colours used:")
    for hex_code, count in palette_usage_report(indices, lookups):
        log(f"  {hex_code}: {count:,}")
    transparent = int(np.count_nonzero(indices == transparent_index))
    if transparent:
        log(f"  transparent: {transparent:,}")


def quantize_file(src_path: Path, job: FileJob) -> Path:
    """Load, quantize, map and save one image; returns the written path."""
    t_start = time.perf_counter()
    print_banner(src_path.name)

    rgba = load_image_rgba(src_path)
    height, width = rgba.shape[:2]
    t_loaded = time.perf_counter()
    if job.debug:
        alpha = rgba[..., 3]
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Loaded", f"{width}x{height}"),
                    ("Opaque", int(np.count_nonzero(alpha == OPAQUE_ALPHA))),
                    ("Clear", int(np.count_nonzero(alpha == 0))),
                ]
            )
        )

    indices, result = quantize_image(rgba, job.options, mapper=job.mapper, debug=job.debug)
    t_quantized = time.perf_counter()

    palette = result.palette
    budget = job.options.max_colors - 1
    if len(palette) < budget:
        note = f"palette has {len(palette)} of {budget} colours (not enough distinct colours)"
        if job.debug:
            debug_log(note)
        else:
            log(note)

    out_path = job.output_path(src_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    written = save_indexed_png(out_path, indices, result)
    t_saved = time.perf_counter()

    log(f"Wrote {written.name} | size={width}x{height} | palette_size={len(palette)}")
    _report(indices, result.lookups, result.transparent_index)

    total = format_duration(t_saved - t_start)
    if job.debug:
        stages = key_value_pairs_to_string(
            [
                ("load", format_duration(t_loaded - t_start, precise=True)),
                ("quantize", format_duration(t_quantized - t_loaded, precise=True)),
                ("save", format_duration(t_saved - t_quantized, precise=True)),
            ],
            sep=", ",
            eq="=",
        )
        debug_log(f"Total {total}  ({stages})")
    else:
        log(f"Total time {total}")
    return written


def run_file(path: Path, job: FileJob) -> bool:
    """quantize_file() with failures logged instead of raised. Returns success."""
    if path.stem.endswith(OUTPUT_SUFFIX):
        print_banner(path.name)
        debug_log(f"skipped: already a {OUTPUT_SUFFIX} output")
        return True
    try:
        quantize_file(path, job)
    except (OSError, ValueError) as e:
        error(f"{path.name}: {e}")
        return False
    return True


def run_file_captured(path: Path, job: FileJob) -> Tuple[str, bool]:
    """
    run_file() with stdout collected into a string.

    Runs in a worker process, so the redirect only touches that process.
    The caller prints the text in submission order.
    """
    buf = io.StringIO()
    with redirect_stdout(buf):
        ok = run_file(path, job)
    return buf.getvalue(), ok


def list_image_files(folder: Path) -> List[Path]:
    """
    Readable images in a folder, sorted by name, excluding this tool's own outputs.
    Files with an image extension that Pillow cannot open are skipped with a warning.
    """
    files = []
    for p in sorted(folder.iterdir(), key=lambda p: p.name.lower()):
        if not p.is_file() or p.suffix.lower() not in IMAGE_EXTS:
            continue
        if p.stem.endswith(OUTPUT_SUFFIX):
            continue
        if not is_image_file(p):
            warn(f"skipping unreadable image {p.name}")
            continue
        files.append(p)
    return files


def run_folder(folder: Path, job: FileJob, jobs: int) -> bool:
    files = list_image_files(folder)
    if job.debug:
        debug_log(key_value_pairs_to_string([("Images", len(files)), ("Jobs", jobs)]))
    if not files:
        warn(f"no images found in {folder}")
        return True

    if jobs == 1:
        return all([run_file(p, job) for p in files])

    with ProcessPoolExecutor(max_workers=jobs) as pool:
        blocks = list(pool.map(run_file_captured, files, [job] * len(files)))
    for text, _ok in blocks:
        print(text, end="", flush=True)
    return all(ok for _text, ok in blocks)


# Entry point


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point for a single image or a folder. Returns the exit code."""
    enable_line_buffered_stdout()
    args = parse_cli_args(argv)

    try:
        options = QuantizeOptions(
            alpha_threshold=args.alpha_threshold,
            alpha_fader=args.alpha_fader,
            max_colors=args.colors,
        )
    except ValueError as e:
        error(str(e))
        return 2
    job = FileJob(options, args.mapper, args.debug, args.outdir)

    print_config_line(
        "quantize",
        [
            ("Colors", options.max_colors),
            ("Alpha threshold", options.alpha_threshold),
            ("Alpha fader", options.alpha_fader),
            ("Mapper", job.mapper),
            ("Jobs", args.jobs),
        ],
        debug=False,
    )

    src: Path = args.src
    if not src.exists():
        error(f"not found: {src}")
        return 2
    ok = run_folder(src, job, args.jobs) if src.is_dir() else run_file(src, job)
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
