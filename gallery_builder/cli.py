"""Command line entry point for the gallery builder.

Usage:
    gallery-builder /path/to/albums/myalbum
    gallery-builder /path/to/albums/myalbum --photos-per-page 30 --strict-pairing
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from pydantic import ValidationError

from gallery_builder.config import get_settings
from gallery_builder.diagnostics import DiagnosticsCollector
from gallery_builder.pipeline.build import GalleryDirectoryError, run_build


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gallery-builder",
        description="Build Galleria HTML pages from an old PHP Gallery album directory",
    )
    parser.add_argument("gallery_dir", help="Path to the gallery album directory")
    parser.add_argument(
        "--photos-per-page",
        type=int,
        default=None,
        help="Images per output page (default: 25)",
    )
    parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory for the page files (default: the gallery directory)",
    )
    parser.add_argument(
        "--strict-pairing",
        action="store_true",
        default=None,
        help="Re-synchronise pairing after an image without a thumbnail",
    )
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING or ERROR")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the builder and return the process exit code."""
    args = build_parser().parse_args(argv)

    overrides = {
        "photos_per_page": args.photos_per_page,
        "output_dir": args.output_dir,
        "strict_pairing": args.strict_pairing,
        "log_level": args.log_level,
    }
    try:
        settings = get_settings(**{k: v for k, v in overrides.items() if v is not None})
    except ValidationError as e:
        print(f"Invalid settings: {e}")
        return 1

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )

    diagnostics = DiagnosticsCollector()
    try:
        results = run_build(args.gallery_dir, settings=settings, diagnostics=diagnostics)
    except GalleryDirectoryError as e:
        print(e)
        return 1
    except OSError as e:
        print(f"Error reading gallery {args.gallery_dir}: {e}")
        return 1

    print(f"\nBuild status: {results['status']}")
    print(f"  captions: {results['captions']}")
    print(f"  image pairs: {results['pairs']}")
    print(f"  pages: {len(results['pages'])}")

    if results["errors"]:
        print(f"\nDiagnostics ({len(results['errors'])}):")
        for err in results["errors"]:
            print(f"  - {err}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
