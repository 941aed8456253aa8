#!/usr/bin/env python3
"""
OCR Preprocessing Pipeline CLI.

Batch-process images from a file or directory through the preprocessing
pipeline and write the recognition tensors as .npy files.

Usage:
    python main.py --input samples/
    python main.py --input samples/ --output output/tensors --debug
    python main.py --input photo.jpg --limit 1

Pipeline Steps:
    S1: Preprocessing   - Orientation fix, scene/layout, rectification
    S2: Enhancement     - Contrast, sharpness (documents only)
    S3: Normalization   - Planar float tensor (3, H, W)

Output:
    <output>/<frameId>.npy for every image that produced a tensor.
    When --debug is enabled, intermediate images are saved to output/debug/
    by the service debug mechanisms.
"""

import sys
import os
import argparse
import logging
import time
from pathlib import Path
from typing import List, Optional

import cv2
import numpy as np

# Add project root to path
PROJECT_ROOT = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, PROJECT_ROOT)

from core.imaging.pixel_buffer import fromBgr
from core.preprocessor.sampling_planner import SamplingPlanner
from services.pipeline_orchestrator import PipelineOrchestrator, PipelineResult


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Image Loading
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

SUPPORTED_EXTENSIONS = {'.jpg', '.jpeg', '.png', '.bmp', '.tiff', '.webp'}


def loadImages(inputPath: str) -> List[Path]:
    """
    Load list of image files from a file or directory.

    Args:
        inputPath: Image file, or directory searched recursively.

    Returns:
        List of image file paths, sorted by name.
    """
    logger = logging.getLogger(__name__)
    path = Path(inputPath)

    if not path.exists():
        logger.error(f"Input not found: {inputPath}")
        return []

    if path.is_file():
        if path.suffix.lower() not in SUPPORTED_EXTENSIONS:
            logger.error(f"Unsupported image type: {path.suffix}")
            return []
        return [path]

    imageFiles = [
        p for p in path.rglob("*")
        if p.is_file() and p.suffix.lower() in SUPPORTED_EXTENSIONS
    ]
    imageFiles = sorted(imageFiles, key=lambda p: str(p).lower())

    logger.info(f"Found {len(imageFiles)} images in {inputPath} (recursive)")
    return imageFiles


def readImage(imagePath: Path, maxSide: Optional[int] = None) -> Optional[np.ndarray]:
    """
    Decode an image file into an RGBA buffer.

    Args:
        imagePath: Image file.
        maxSide: When set, subsample by the power-of-two factor SamplingPlanner
                 picks for a maxSide x maxSide target.

    Returns:
        RGBA buffer, or None if the file is unreadable.
    """
    image = cv2.imread(str(imagePath), cv2.IMREAD_UNCHANGED)
    if image is None:
        return None

    if maxSide:
        h, w = image.shape[:2]
        factor = SamplingPlanner.plan(w, h, maxSide, maxSide)
        if factor > 1:
            image = cv2.resize(
                image,
                (max(1, w // factor), max(1, h // factor)),
                interpolation=cv2.INTER_AREA
            )
            logging.getLogger(__name__).debug(f"Subsampled {imagePath.name} by {factor}: {w}x{h}")

    return fromBgr(image)


def frameIdFor(imagePath: Path, inputPath: str) -> str:
    """Build a frameId from the path relative to the input: sub/dir/a.jpg -> sub_dir_a."""
    base = Path(inputPath)
    if base.is_dir():
        try:
            relative = imagePath.relative_to(base)
            return str(relative.with_suffix('')).replace(os.sep, '_')
        except ValueError:
            pass
    return imagePath.stem


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Image Processing
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def saveTensor(result: PipelineResult, outputDir: Path) -> Optional[Path]:
    """
    Save the tensor of a pipeline result as <frameId>.npy.

    Returns:
        Path of the written file, or None if the result has no tensor.
    """
    if result.tensor is None:
        return None

    outputDir.mkdir(parents=True, exist_ok=True)
    tensorPath = outputDir / f"{result.frameId}.npy"
    planar = result.tensor.reshape(3, result.tensorHeight, result.tensorWidth)
    np.save(str(tensorPath), planar)
    return tensorPath


def processAll(
    orchestrator: PipelineOrchestrator,
    inputPath: str,
    outputDir: str,
    limit: Optional[int] = None,
    maxSide: Optional[int] = None
) -> List[PipelineResult]:
    """
    Process all images under an input path.

    Args:
        orchestrator: Pipeline orchestrator with all services.
        inputPath: Image file or directory.
        outputDir: Directory receiving the .npy tensors.
        limit: Maximum number of images to process (None = all).
        maxSide: Decode subsampling target (None = full size).

    Returns:
        List of pipeline results, one per readable image.
    """
    logger = logging.getLogger(__name__)

    imageFiles = loadImages(inputPath)
    if not imageFiles:
        logger.warning("No images found to process")
        return []

    if limit is not None and limit > 0:
        imageFiles = imageFiles[:limit]
        logger.info(f"Processing limited to {limit} images")

    results = []
    totalCount = len(imageFiles)
    successCount = 0
    outputPath = Path(outputDir)

    logger.info(f"Starting batch processing of {totalCount} images...")
    batchStartTime = time.time()

    for idx, imagePath in enumerate(imageFiles, 1):
        frameId = frameIdFor(imagePath, inputPath)
        logger.info(f"[{idx}/{totalCount}] Processing: {imagePath.name}")

        image = readImage(imagePath, maxSide)
        if image is None:
            logger.error("  ✗ Failed to read image")
            continue

        result = orchestrator.process(image, frameId)
        results.append(result)

        if result.success:
            successCount += 1
            tensorPath = saveTensor(result, outputPath)
            logger.info(
                f"  ✓ Scene: {result.scene.value}, Layout: {result.layout.value}, "
                f"Tensor: {tensorPath}"
            )
        else:
            logger.warning("  ✗ No tensor produced")

        logger.info(f"  Time: {result.timings.get('total_pipeline', 0):.1f}ms")

    batchTotalTime = (time.time() - batchStartTime) * 1000
    logger.info("=" * 60)
    logger.info("BATCH PROCESSING COMPLETE")
    logger.info("=" * 60)
    logger.info(f"Total images:  {totalCount}")
    logger.info(f"Success:       {successCount} ({successCount/totalCount*100:.1f}%)")
    logger.info(f"Failed:        {totalCount - successCount}")
    logger.info(f"Total time:    {batchTotalTime:.1f}ms")
    logger.info(f"Avg time:      {batchTotalTime/totalCount:.1f}ms per image")

    if orchestrator.isDebugEnabled():
        logger.info(f"Debug output:  {orchestrator.configService.getDebugBasePath()}")

    return results


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# CLI Interface
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def setupLogging(debugMode: bool = False) -> None:
    """
    Setup application logging.

    Args:
        debugMode: If True, set log level to DEBUG.
    """
    level = logging.DEBUG if debugMode else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )


def parseArgs(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="OCR preprocessing pipeline - encode images as recognition tensors",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py --input samples/
  python main.py --input samples/ --output output/tensors --debug
  python main.py --input photo.jpg

Output:
  One <frameId>.npy per image, shaped (3, targetHeight, targetWidth).
        """
    )

    parser.add_argument(
        "--input", "-i",
        type=str,
        default="samples",
        help="Image file or directory containing images (default: samples)"
    )

    parser.add_argument(
        "--output", "-o",
        type=str,
        default="output/tensors",
        help="Directory for .npy tensors (default: output/tensors)"
    )

    parser.add_argument(
        "--config", "-c",
        type=str,
        default="config/application_config.json",
        help="Path to configuration file"
    )

    parser.add_argument(
        "--limit", "-n",
        type=int,
        default=None,
        help="Maximum number of images to process"
    )

    parser.add_argument(
        "--max-side", "-m",
        type=int,
        default=1024,
        help="Subsample large images while decoding toward this side (0 = full size, default: 1024)"
    )

    parser.add_argument(
        "--debug", "-d",
        action="store_true",
        help="Enable debug mode (saves intermediate output to output/debug/)"
    )

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point."""
    args = parseArgs(argv)

    setupLogging(debugMode=args.debug)
    logger = logging.getLogger(__name__)

    logger.info("=" * 60)
    logger.info("OCR PREPROCESSING PIPELINE")
    logger.info("=" * 60)
    logger.info(f"Input:  {args.input}")
    logger.info(f"Output: {args.output}")
    logger.info(f"Config: {args.config}")
    logger.info(f"Debug:  {args.debug}")
    if args.limit:
        logger.info(f"Limit:  {args.limit}")
    logger.info("=" * 60)

    if not Path(args.input).exists():
        logger.error(f"Input not found: {args.input}")
        sys.exit(1)

    orchestrator = None
    try:
        logger.info("Initializing pipeline...")
        orchestrator = PipelineOrchestrator(args.config)

        if args.debug:
            orchestrator.setDebugEnabled(True)
            logger.info(f"Debug output will be saved to: {orchestrator.configService.getDebugBasePath()}")

        logger.info("Pipeline initialized successfully")
        logger.info("=" * 60)

        results = processAll(
            orchestrator=orchestrator,
            inputPath=args.input,
            outputDir=args.output,
            limit=args.limit,
            maxSide=args.max_side
        )

        successCount = sum(1 for r in results if r.success)
        sys.exit(0 if successCount > 0 else 1)

    except KeyboardInterrupt:
        logger.info("\nInterrupted by user")
        sys.exit(130)
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        sys.exit(1)
    finally:
        if orchestrator is not None:
            orchestrator.shutdown()


if __name__ == "__main__":
    main()
