"""
Render a saved segmentation response onto an image.

Thin CLI wrapper over ``maskcompose.pipeline.run_compositing``; the response
JSON is what the segmentation collaborator returned (masks + boxes).
"""

from __future__ import annotations

import argparse
import json
import logging
import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from ..errors import MaskComposeError
from ..models.segmentation_result import SegmentationResult
from ..models.style import Mode
from ..pipeline.compositing_pipeline import count_objects, redact_regions
from ..repositories.image_repository import ImageRepository

logger = logging.getLogger(__name__)


def _configure_logging() -> None:
    load_dotenv()
    logging.basicConfig(
        level=getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO),
        format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
        datefmt='%H:%M:%S'
    )


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Composite segmentation masks onto an image")
    parser.add_argument("image", type=Path, help="Base image path")
    parser.add_argument("response", type=Path, help="Segmentation response JSON path")
    parser.add_argument("--mode", choices=[m.value for m in Mode], default=Mode.COUNT.value,
                        help="count: tinted numbered overlays, redact: opaque black patches")
    parser.add_argument("--out", type=Path, required=True, help="Output image path")
    args = parser.parse_args(argv)

    _configure_logging()

    image_repository = ImageRepository()
    try:
        base = image_repository.load(args.image)
        segmentation = SegmentationResult.from_response(json.loads(args.response.read_text()))
        if Mode(args.mode) is Mode.REDACT:
            result = redact_regions(base, segmentation)
        else:
            result = count_objects(base, segmentation)
    except (OSError, ValueError, MaskComposeError) as err:
        logger.error(f"Rendering failed: {err}")
        return 1

    image_repository.save(result.image, args.out)

    for failure in result.errors:
        print(f"mask {failure.index}: {failure.reason}")
    if result.is_empty:
        print("No regions found")
    else:
        print(f"Count: {result.count}")
    print(f"Saved: {args.out}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
