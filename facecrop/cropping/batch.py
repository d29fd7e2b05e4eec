"""
Directory batch cropping.

Only direct entries of the input directory are considered; sub-directories
and files without a supported image extension are ignored without being
opened or reported. A failing file never stops the batch: each file ends
up as one FileOutcome in the returned BatchReport.
"""

import sys
from pathlib import Path
from typing import Optional

from facecrop.cropping.crop_image import crop_face_image
from facecrop.cropping.errors import DetectionValidationError, FaceCropError, ImageIOError
from facecrop.cropping.paths import ensure_output_dir, is_image_file, plan_in_directory
from facecrop.cropping.schemas import BatchReport, FileOutcome


def iter_image_files(directory: Path) -> list:
    """Image files directly inside `directory`, sorted by name."""
    try:
        entries = sorted(Path(directory).iterdir())
    except OSError as exc:
        raise ImageIOError(f"Failed to read input directory {directory}: {exc}") from exc
    return [path for path in entries if path.is_file() and is_image_file(path)]


def crop_one(input_path: Path, output_dir: Optional[Path], detector, enhance: bool = False) -> FileOutcome:
    output_path = None
    try:
        plan = plan_in_directory(input_path, output_dir)
        output_path = plan.output_path
        crop = crop_face_image(plan.input_path, plan.output_path, detector, enhance)
    except DetectionValidationError as exc:
        return FileOutcome(input_path=input_path, output_path=output_path, status="skipped",
                           reason=str(exc), error_kind=type(exc).__name__)
    except FaceCropError as exc:
        return FileOutcome(input_path=input_path, output_path=output_path, status="failed",
                           reason=str(exc), error_kind=type(exc).__name__)
    return FileOutcome(input_path=input_path, output_path=output_path, status="succeeded", crop=crop)


def crop_directory(input_dir: Path, output_dir: Optional[Path], detector,
                   enhance: bool = False) -> BatchReport:
    """
    Crop every image in a directory, one after another.

    Args:
        input_dir: Directory to scan (non-recursive)
        output_dir: Destination directory, created if missing; None writes siblings
        detector: Object with detect(gray) -> list[BoundingBox]
        enhance: Apply CLAHE before detection

    Returns:
        BatchReport with one outcome per image file
    """
    input_dir = Path(input_dir)
    image_files = iter_image_files(input_dir)
    if output_dir is not None:
        output_dir = ensure_output_dir(output_dir)

    report = BatchReport(input_dir=input_dir, output_dir=output_dir)
    for path in image_files:
        outcome = crop_one(path, output_dir, detector, enhance)
        report.outcomes.append(outcome)

        if outcome.status == "succeeded":
            print(f"[INFO] Processed: {path.name}")
        else:
            print(f"[WARN] Skipping {path.name}: {outcome.reason}", file=sys.stderr)

    return report


def write_report(report: BatchReport, report_path: Path):
    report_path = Path(report_path)
    try:
        report_path.parent.mkdir(parents=True, exist_ok=True)
        report_path.write_text(report.model_dump_json(indent=2))
    except OSError as exc:
        raise ImageIOError(f"Failed to write report {report_path}: {exc}") from exc
