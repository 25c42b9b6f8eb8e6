from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import orjson

from .errors import ImageDiffError
from .images import compare_images
from .settings import configure_logging, log_level_from_env
from .types import RGB, CompareOptions

logger = logging.getLogger(__name__)


def parse_color(text: str) -> RGB:
    parts = text.split(",")
    try:
        values = tuple(int(part) for part in parts)
    except ValueError:
        values = ()
    if len(values) != 3 or not all(0 <= v <= 255 for v in values):
        raise argparse.ArgumentTypeError(f'Invalid color format: {text}. Use format: "r,g,b"')
    return values[0], values[1], values[2]


def _clamp(value: float) -> float:
    return min(max(value, 0.0), 1.0)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="imagediff",
        description="Compare two PNG images pixel by pixel and write a diff image.",
    )
    parser.add_argument("image1", type=Path, help="Path to the first image")
    parser.add_argument("image2", type=Path, help="Path to the second image")
    parser.add_argument(
        "-o", "--output", type=Path, default=Path("diff.png"), help="Path to save the diff image"
    )
    parser.add_argument(
        "-t",
        "--threshold",
        type=float,
        default=0.1,
        help="Matching threshold (0-1, less is more sensitive)",
    )
    parser.add_argument(
        "--include-aa",
        "--aa",
        dest="include_aa",
        action="store_true",
        help="Count anti-aliased pixels as differences",
    )
    parser.add_argument(
        "-a", "--alpha", type=float, default=1.0, help="Opacity of unchanged pixels (0-1)"
    )
    parser.add_argument(
        "--aa-color",
        type=parse_color,
        default=(255, 255, 0),
        help="Color of anti-aliased pixels (comma-separated RGB)",
    )
    parser.add_argument(
        "--diff-color",
        type=parse_color,
        default=(255, 0, 0),
        help="Color of different pixels (comma-separated RGB)",
    )
    parser.add_argument(
        "--diff-color-alt",
        type=parse_color,
        default=None,
        help="Color of pixels that got darker in the second image",
    )
    parser.add_argument(
        "--diff-mask", action="store_true", help="Draw the diff over a transparent background"
    )
    parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show debug logs")
    return parser


def options_from_args(args: argparse.Namespace) -> CompareOptions:
    return CompareOptions(
        threshold=_clamp(args.threshold),
        include_anti_aliasing=args.include_aa,
        output_alpha=_clamp(args.alpha),
        anti_alias_color=args.aa_color,
        diff_color=args.diff_color,
        diff_color_alt=args.diff_color_alt,
        diff_mask_only=args.diff_mask,
    )


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose, log_level_from_env())

    image1 = args.image1.resolve()
    image2 = args.image2.resolve()
    output = args.output.resolve()

    try:
        options = options_from_args(args)
        logger.info("Comparing %s and %s into %s", image1, image2, output)
        result = compare_images(image1, image2, options, output_path=output)
    except ImageDiffError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.json:
        payload = result.model_dump(exclude={"diff_png"})
        payload["output"] = str(output)
        sys.stdout.write(orjson.dumps(payload, option=orjson.OPT_INDENT_2).decode() + "\n")
    else:
        print("Comparison complete!")
        print(f"  Image 1: {image1}")
        print(f"  Image 2: {image2}")
        print(f"  Pixels different: {result.mismatched_pixels}")
        print(f"  Difference ratio: {result.difference_ratio * 100:.2f}%")
        print(f"  Diff image saved: {output}")

    return 1 if result.mismatched_pixels > 0 else 0


if __name__ == "__main__":
    sys.exit(main())
