"""
Single-face square cropping for one image or a directory of images.

Pipeline per image:
    open (Pillow) -> grayscale -> detect (OpenCV cascade) -> validate exactly
    one face -> compute square crop -> crop -> save

Nothing is written unless every stage before save succeeds.

Usage:
    # Single image, writes photo_cropped.jpg next to the input
    python -m facecrop.cropping.crop_image --input photo.jpg

    # Directory, writes <stem>_cropped.<ext> into out/ and a JSON report
    python -m facecrop.cropping.crop_image \
        --input photos/ --output out/ --report out/report.json

    # Low-light photos
    python -m facecrop.cropping.crop_image --input photo.jpg --enhance
"""

import argparse
import sys
from pathlib import Path

import numpy as np
from PIL import Image, UnidentifiedImageError

from facecrop.cropping.errors import (
    DetectionValidationError,
    FaceCropError,
    ImageIOError,
    ModelError,
)
from facecrop.cropping.geometry import compute_crop_rect
from facecrop.cropping.paths import ensure_output_dir, plan_single
from facecrop.cropping.schemas import CropRect
from facecrop.detection.face_detector import (
    DetectorConfig,
    enhance_contrast,
    load_model_bytes,
    open_detector,
)


def load_image(input_path: Path) -> Image.Image:
    """Open an image with Pillow and force decoding so errors surface here."""
    try:
        image = Image.open(input_path)
        image.load()
    except (OSError, ValueError, UnidentifiedImageError, Image.DecompressionBombError) as exc:
        raise ImageIOError(f"Failed to open image {input_path}: {exc}") from exc
    return image


def to_grayscale(image: Image.Image) -> np.ndarray:
    return np.array(image.convert("L"), dtype=np.uint8)


def validate_detections(faces: list):
    """
    Return the single detection or raise DetectionValidationError.

    Zero or several faces are a policy rejection, not a technical fault.
    """
    if len(faces) == 0:
        raise DetectionValidationError("Validation Failed: No faces detected.", 0)
    if len(faces) > 1:
        raise DetectionValidationError(
            f"Validation Failed: Multiple faces detected (Found {len(faces)}).", len(faces)
        )
    return faces[0]


def save_image(image: Image.Image, output_path: Path):
    try:
        image.save(output_path)
    except (OSError, ValueError) as exc:
        raise ImageIOError(f"Failed to save output {output_path}: {exc}") from exc


def crop_face_image(input_path: Path, output_path: Path, detector, enhance: bool = False,
                    make_parents: bool = False) -> CropRect:
    """
    Crop one image to a square centered on its single face.

    Args:
        input_path: Source image
        output_path: Destination; the format follows its extension
        detector: Object with detect(gray) -> list[BoundingBox]
        enhance: Apply CLAHE to the grayscale copy before detection
        make_parents: Create the output directory right before saving

    Returns:
        The CropRect that was written
    """
    image = load_image(input_path)
    width, height = image.size

    gray = to_grayscale(image)
    if enhance:
        gray = enhance_contrast(gray)

    face = validate_detections(detector.detect(gray))
    crop = compute_crop_rect(width, height, face)

    if make_parents:
        ensure_output_dir(Path(output_path).parent)
    save_image(image.crop(crop.box()), output_path)
    return crop


def run_single(input_path: Path, output, detector, enhance: bool = False) -> int:
    """Process one file and return the process exit code."""
    try:
        plan = plan_single(input_path, output)
        crop = crop_face_image(plan.input_path, plan.output_path, detector, enhance,
                               make_parents=output is not None)
    except FaceCropError as exc:
        print(f"[ERROR] Error processing {input_path}: {exc}", file=sys.stderr)
        return 1

    print(f"[INFO] Successfully processed: {input_path}")
    print(f"[RESULT] crop=({crop.x},{crop.y}) side={crop.side} -> {plan.output_path}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Face Crop - square crop centered on the single face")
    parser.add_argument("--input", "-i", type=Path, required=True,
                        help="Input path (a single image file or a directory)")
    parser.add_argument("--output", "-o", type=Path, default=None,
                        help="Output file (file input) or output directory (directory input)")
    parser.add_argument("--enhance", action="store_true",
                        help="Enable CLAHE contrast equalisation before detection")
    parser.add_argument("--report", type=Path, default=None,
                        help="Directory mode: write the batch report as JSON to this path")
    parser.add_argument("--model", type=Path, default=None,
                        help="Cascade XML model (default: bundled frontal face cascade)")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    if not args.input.exists():
        print(f"[ERROR] Input not found: {args.input}", file=sys.stderr)
        return 1

    try:
        model_bytes = load_model_bytes(args.model)
        with open_detector(model_bytes, DetectorConfig()) as detector:
            if args.input.is_dir():
                from facecrop.cropping.batch import crop_directory, write_report

                report = crop_directory(args.input, args.output, detector, args.enhance)
                print(f"[INFO] Summary: {report.succeeded} succeeded, "
                      f"{report.skipped} skipped, {report.failed} failed")
                if args.report is not None:
                    write_report(report, args.report)
                    print(f"[INFO] Report saved to: {args.report}")
                return 0

            if args.report is not None:
                print(f"[WARN] --report only applies to directory input, ignoring {args.report}",
                      file=sys.stderr)
            return run_single(args.input, args.output, detector, args.enhance)
    except (ModelError, ImageIOError) as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
