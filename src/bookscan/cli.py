"""Command-line entry point: recognize book pages and print their ISBN.

Usage:
    bookscan colophon.jpg cover.png
    bookscan --json --no-correction page.jpg
    python -m src.bookscan.cli --config my_config.yaml page.jpg
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import ValidationError

from .errors import BookScanError
from .pipeline import BookScanPipeline


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Recognize book page images and extract ISBN-13",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("images", nargs="+", type=Path, help="Image files to process")
    parser.add_argument(
        "--config", type=Path, default=None, help="Path to YAML configuration file"
    )
    parser.add_argument(
        "--no-correction",
        action="store_true",
        help="Skip generative text correction",
    )
    parser.add_argument(
        "--raw", action="store_true", help="Also print the uncorrected OCR text"
    )
    parser.add_argument(
        "--json", action="store_true", help="Print one JSON object per image"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    return parser


async def process_images(
    pipeline: BookScanPipeline, images: List[Path], args: argparse.Namespace
) -> int:
    """Process images sequentially and print results.

    Returns:
        Number of images that failed.
    """
    failures = 0

    for image_path in images:
        try:
            result = await pipeline.recognize_and_normalize_with_details(image_path)
        except BookScanError as e:
            logging.error(f"{image_path}: {e}")
            failures += 1
            if args.json:
                print(json.dumps({"image": str(image_path), "error": str(e)}, ensure_ascii=False))
            else:
                print(f"❌ {image_path}: {e}")
            continue

        isbn = pipeline.extract_isbn(result.text)

        if args.json:
            record = {
                "image": str(image_path),
                "isbn": isbn,
                "text": result.text,
                "correction_applied": result.correction_applied,
                "processing_time_ms": round(result.processing_time_ms, 1),
            }
            if args.raw:
                record["raw_text"] = result.raw_text
            print(json.dumps(record, ensure_ascii=False))
            continue

        print("=" * 60)
        print(f"Image: {image_path}")
        print(f"ISBN:  {isbn or '-'}")
        print(f"Corrected: {result.correction_applied}")
        print("-" * 60)
        print(result.text)
        if args.raw:
            print("-" * 60 + " raw")
            print(result.raw_text)

    return failures


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    try:
        pipeline = BookScanPipeline.from_config(
            config_path=args.config, enable_correction=not args.no_correction
        )
    except (
        FileNotFoundError,
        ImportError,
        RuntimeError,
        yaml.YAMLError,
        ValidationError,
    ) as e:
        logging.error(f"Pipeline initialization failed: {e}")
        print(f"\n❌ Pipeline initialization failed: {e}", file=sys.stderr)
        return 2

    failures = asyncio.run(process_images(pipeline, args.images, args))
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
