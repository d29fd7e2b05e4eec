"""
Annotated preview of what the cropper sees in one image.

Outlines every detection with its score and, when exactly one face was
found, the square that would be cropped. Useful to check why an image was
skipped.

Usage:
    python -m facecrop.cropping.preview \
        --input photos/group.jpg \
        --output previews/group_preview.png
"""

import argparse
import sys
from pathlib import Path
from typing import Optional

from PIL import Image, ImageDraw

from facecrop.cropping.crop_image import load_image, save_image, to_grayscale
from facecrop.cropping.errors import FaceCropError
from facecrop.cropping.geometry import compute_crop_rect
from facecrop.cropping.paths import ensure_output_dir
from facecrop.cropping.schemas import CropRect
from facecrop.detection.face_detector import enhance_contrast, load_model_bytes, open_detector

FACE_COLOR = (0, 255, 0)
CROP_COLOR = (255, 165, 0)


def annotate_preview(image: Image.Image, detections: list, crop: Optional[CropRect]) -> Image.Image:
    """
    Return an RGB copy of `image` with face boxes, scores and the crop square drawn on it.

    Faces outside the crop are still drawn, so a rejected group photo shows
    every candidate the detector found.
    """
    annotated = image.convert("RGB")
    draw = ImageDraw.Draw(annotated)
    line = max(1, min(annotated.size) // 200)

    for det in detections:
        draw.rectangle(
            [det.x, det.y, det.x + det.width - 1, det.y + det.height - 1],
            outline=FACE_COLOR, width=line,
        )
        draw.text((det.x + line, det.y + line), f"{det.score:.2f}", fill=FACE_COLOR)

    if crop is not None:
        left, upper, right, lower = crop.box()
        draw.rectangle([left, upper, right - 1, lower - 1], outline=CROP_COLOR, width=line * 2)

    return annotated


def run_preview(input_path: Path, output_path: Path, detector, enhance: bool = False):
    """
    Detect faces and write an annotated preview.

    Returns:
        list[BoundingBox]: all detections
        CropRect | None: the crop square when exactly one face was found
    """
    image = load_image(input_path)
    width, height = image.size

    gray = to_grayscale(image)
    if enhance:
        gray = enhance_contrast(gray)
    detections = detector.detect(gray)

    crop = compute_crop_rect(width, height, detections[0]) if len(detections) == 1 else None

    output_path = Path(output_path)
    ensure_output_dir(output_path.parent)
    save_image(annotate_preview(image, detections, crop), output_path)

    return detections, crop


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Face Crop - annotated detection preview")
    parser.add_argument("--input", "-i", type=Path, required=True, help="Path to input image")
    parser.add_argument("--output", "-o", type=Path, required=True, help="Path to annotated preview image")
    parser.add_argument("--enhance", action="store_true", help="Enable CLAHE before detection")
    parser.add_argument("--model", type=Path, default=None, help="Cascade XML model")
    args = parser.parse_args(argv)

    if not args.input.is_file():
        print(f"[ERROR] Input file not found: {args.input}", file=sys.stderr)
        return 1

    try:
        with open_detector(load_model_bytes(args.model)) as detector:
            detections, crop = run_preview(args.input, args.output, detector, args.enhance)
    except FaceCropError as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 1

    print(f"[RESULT] {len(detections)} faces detected")
    for i, det in enumerate(detections):
        print(f"  [{i+1}] bbox=({det.x},{det.y}) {det.width}x{det.height} score={det.score}")
    if crop is not None:
        print(f"  crop=({crop.x},{crop.y}) side={crop.side}")
    print(f"[INFO] Preview saved to: {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
