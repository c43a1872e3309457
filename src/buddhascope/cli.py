"""
CLI entry point for the multi-Julia density renderer.

Usage:
    buddhascope [options]
    python -m buddhascope [options]
"""

import argparse
import sys
import time
from pathlib import Path

from buddhascope.core.canvas import CanvasAllocationError
from buddhascope.io.image import ImageWriteError, save_image
from buddhascope.renderer import BuddhaRenderer, RenderConfig

PROFILES = {
    "low": {"width": 640, "height": 360, "samples": 1_000_000},
    "medium": {"width": 1920, "height": 1080, "samples": 10_000_000},
    "high": {"width": 3840, "height": 2160, "samples": 26_000_000},
}


class _ProgressBar:
    """
    Progress callback drawing a bar on a TTY.

    Off a TTY it prints one line per twentieth of the run. Worker threads
    report summed, uneven sample counts, so the last printed step is kept
    rather than testing ``current`` against a fixed stride.
    """

    def __init__(self, width: int = 35):
        self.width = width
        self._last_step = -1

    def __call__(self, current: int, total: int) -> None:
        total = max(total, 1)
        pct = current / total * 100
        if sys.stdout.isatty():
            filled = int(self.width * current / total)
            bar = "#" * filled + "-" * (self.width - filled)
            sys.stdout.write(f"\r[{bar}] {pct:5.1f}%  sample {current}/{total}")
            sys.stdout.flush()
            if current >= total:
                sys.stdout.write("\n")
            return

        step = min(current, total) * 20 // total
        if step > self._last_step:
            self._last_step = step
            print(f"{pct:5.1f}%  sample {current}/{total}", flush=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="buddhascope",
        description="Multi-Julia inverse-iteration density renderer",
    )

    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=Path("buddhascope.ppm"),
        help="Output image; .ppm/.pnm are written directly, other suffixes via Pillow "
             "(default: buddhascope.ppm)",
    )

    # Resolution & Profile
    parser.add_argument(
        "-p", "--profile", type=str, default="medium",
        choices=sorted(PROFILES),
        help="Target profile (low: 640x360 1M samples, medium: 1080p 10M, high: 4k 26M)",
    )
    parser.add_argument("--width", type=int, default=None, help="Image width (overrides profile)")
    parser.add_argument("--height", type=int, default=None, help="Image height (overrides profile)")
    parser.add_argument(
        "-n", "--samples", type=int, default=None,
        help="Number of walk samples (overrides profile)",
    )

    # Viewport
    parser.add_argument("--center-re", type=float, default=0.0, help="Real part of the view center (default: 0)")
    parser.add_argument("--center-im", type=float, default=0.0, help="Imaginary part of the view center (default: 0)")
    parser.add_argument("--radius", type=float, default=2.0, help="Half-width of the view (default: 2)")

    # Walk
    parser.add_argument("--seed", type=int, default=None, help="Random seed for a reproducible render")
    parser.add_argument(
        "-j", "--workers", type=int, default=1,
        help="Split the walk over N threads (default: 1)",
    )

    # Overlays
    parser.add_argument("--no-circles", action="store_true", help="Disable the guide circles")

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    p_cfg = PROFILES[args.profile]
    width = args.width or p_cfg["width"]
    height = args.height or p_cfg["height"]
    samples = args.samples or p_cfg["samples"]

    if width < 2 or height < 2:
        print(f"Error: image must be at least 2x2, got {width}x{height}", file=sys.stderr)
        return 1
    if samples <= 0 or args.radius <= 0 or args.workers < 1:
        print("Error: samples, radius and workers must be positive", file=sys.stderr)
        return 1

    config = RenderConfig(
        width=width,
        height=height,
        samples=samples,
        center=complex(args.center_re, args.center_im),
        radius=args.radius,
        seed=args.seed,
        workers=args.workers,
        circles_enabled=not args.no_circles,
    )

    print(f"Rendering {samples} samples at {width}x{height}")
    print(f"  Profile: {args.profile}, Workers: {args.workers}, Seed: {args.seed}")
    t0 = time.time()

    try:
        result = BuddhaRenderer(config).render(progress_callback=_ProgressBar())
    except CanvasAllocationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(f"largest = {result.largest_hit_count:f}")
    print(f"  Render took {time.time() - t0:.1f}s")

    try:
        output = save_image(args.output, result.image)
    except ImageWriteError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(f"  Output: {output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
