#!/usr/bin/env python3
"""Render the default diffuse-spheres scene to a PPM file.

This script renders the red sphere on green ground under a sky gradient,
prints progress and timing, and writes the image as
``image-<width>-<height>-<samples>-<seconds>.ppm``.

Usage:
    python -m examples.render_spheres [options]

Options:
    --width WIDTH         Image width in pixels (default: 256)
    --height HEIGHT       Image height in pixels (default: 256)
    --samples SAMPLES     Number of samples per pixel (default: 32)
    --seed SEED           Random seed (default: current time)
    --spheres N           Number of default-scene spheres to include (default: 2)
    --batch-size SIZE     Samples per progress update (default: 4)
    --output-dir DIR      Directory for output files (default: .)
    --png                 Also write a PNG next to the PPM
    --viewer CMD          Open the PPM with CMD when done (e.g. ffplay)
    --preview             Show the result in a Matplotlib window
    --arch {cpu,gpu}      Taichi backend (default: cpu)
    --quiet               Suppress progress output

Example:
    python -m examples.render_spheres --width 128 --height 128 --samples 8 --seed 7
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

# Ensure the project root is in the Python path for direct execution
_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

import taichi as ti  # noqa: E402

DEFAULT_WIDTH = 256
DEFAULT_HEIGHT = 256
DEFAULT_SAMPLES = 32


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the default diffuse-spheres scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=DEFAULT_WIDTH,
        help=f"Image width in pixels (default: {DEFAULT_WIDTH})",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=DEFAULT_HEIGHT,
        help=f"Image height in pixels (default: {DEFAULT_HEIGHT})",
    )
    parser.add_argument(
        "--samples",
        type=int,
        default=DEFAULT_SAMPLES,
        help=f"Number of samples per pixel (default: {DEFAULT_SAMPLES})",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed (default: current time)",
    )
    parser.add_argument(
        "--spheres",
        type=int,
        default=2,
        help="Number of default-scene spheres to include (default: 2)",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=4,
        help="Samples per progress update (default: 4)",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default=".",
        help="Directory for output files (default: .)",
    )
    parser.add_argument(
        "--png",
        action="store_true",
        help="Also write a PNG next to the PPM",
    )
    parser.add_argument(
        "--viewer",
        type=str,
        default=None,
        help="Open the PPM with this command when done (e.g. ffplay)",
    )
    parser.add_argument(
        "--preview",
        action="store_true",
        help="Show the result in a Matplotlib window",
    )
    parser.add_argument(
        "--arch",
        choices=("cpu", "gpu"),
        default="cpu",
        help="Taichi backend (default: cpu)",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args(argv)


def resolve_seed(seed: int | None) -> int:
    """Return seed, or a seed derived from the wall clock when it is None."""
    if seed is not None:
        return seed
    return int(time.time()) % (2**31)


def initialize_taichi(arch: str, seed: int) -> str:
    """Initialize Taichi with the requested backend and random seed.

    Falls back to the CPU if the GPU backend cannot be initialized.

    Returns:
        Name of the backend being used.
    """
    if arch == "gpu":
        try:
            ti.init(arch=ti.gpu, random_seed=seed)
            return "GPU"
        except Exception:
            pass

    ti.init(arch=ti.cpu, random_seed=seed)
    return "CPU"


def render_spheres(
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
    num_samples: int = DEFAULT_SAMPLES,
    num_spheres: int = 2,
    output_dir: str = ".",
    batch_size: int = 4,
    write_png: bool = False,
    quiet: bool = False,
) -> tuple[Path, float]:
    """Render the default scene and save it as a PPM file.

    Taichi must already be initialized.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        num_samples: Number of samples per pixel.
        num_spheres: Number of default-scene spheres in the surface list.
        output_dir: Directory receiving the output files.
        batch_size: Number of samples to render between progress updates.
        write_png: If True, also write a PNG copy.
        quiet: If True, suppress progress output.

    Returns:
        Tuple of (path to the PPM file, elapsed render seconds).
    """
    # Lazy imports to allow Taichi initialization first
    from src.minitracer.camera.pinhole import setup_camera
    from src.minitracer.core.progressive import ProgressiveRenderer
    from src.minitracer.preview.export import ppm_filename, save_png, save_ppm
    from src.minitracer.scene.spheres import create_default_scene

    if num_samples <= 0:
        raise ValueError(f"Sample count must be positive, got {num_samples}")

    _, camera = create_default_scene(num_spheres)
    setup_camera(camera)

    renderer = ProgressiveRenderer(width, height)

    if not quiet:
        print(f"- Start Rendering... {width} x {height}")

    start_time = time.perf_counter()

    def progress_callback(current: int, target: int) -> None:
        if not quiet:
            progress_pct = (current / target) * 100 if target > 0 else 0
            print(
                f"\rRendering ({target} spp) {progress_pct:5.2f}%",
                end="",
                flush=True,
            )

    renderer.render(
        num_samples=num_samples,
        batch_size=batch_size,
        callback=progress_callback,
    )

    elapsed = time.perf_counter() - start_time
    if not quiet:
        print(f"\n- Render Done! Time={elapsed:f} seconds")

    out_dir = Path(output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    ppm_path = out_dir / ppm_filename(width, height, num_samples, elapsed)
    save_ppm(renderer.get_image_buffer(), width, height, ppm_path)

    if not quiet:
        print(f"- Save as {ppm_path}")

    if write_png:
        png_path = save_png(renderer.get_image_numpy(), ppm_path.with_suffix(".png"))
        if not quiet:
            print(f"- Save as {png_path}")

    return ppm_path, elapsed


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    try:
        seed = resolve_seed(args.seed)
        backend = initialize_taichi(args.arch, seed)
        if not args.quiet:
            print(f"Using {backend} backend (seed {seed})")

        ppm_path, _ = render_spheres(
            width=args.width,
            height=args.height,
            num_samples=args.samples,
            num_spheres=args.spheres,
            output_dir=args.output_dir,
            batch_size=args.batch_size,
            write_png=args.png,
            quiet=args.quiet,
        )

        if args.viewer:
            from src.minitracer.preview.display import launch_viewer

            launch_viewer(ppm_path, args.viewer)

        if args.preview:
            from src.minitracer.core.integrator import get_image_numpy
            from src.minitracer.preview.display import show_preview

            show_preview(get_image_numpy(), title=f"{args.samples} SPP")

        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
