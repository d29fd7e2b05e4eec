"""Output path policy and image-file filtering."""

from pathlib import Path
from typing import Optional

from facecrop.cropping.errors import ImageIOError, PathError
from facecrop.cropping.schemas import PathPlan

OUTPUT_SUFFIX = "_cropped"
IMAGE_EXTENSIONS = frozenset({"jpg", "jpeg", "png", "bmp", "tif", "tiff", "webp"})


def is_image_file(path: Path) -> bool:
    """True when the extension (case-insensitive) is a supported image type."""
    return path.suffix[1:].lower() in IMAGE_EXTENSIONS


def cropped_filename(input_path: Path) -> str:
    """
    Build the output file name: stem + "_cropped" + original extension.

    Raises:
        PathError: if the path has no file name stem
    """
    input_path = Path(input_path)
    if not input_path.stem or input_path.name in (".", ".."):
        raise PathError(f"Input file has no file name: {input_path}")
    return f"{input_path.stem}{OUTPUT_SUFFIX}{input_path.suffix}"


def default_output_path(input_path: Path) -> Path:
    """Sibling output path in the input's own directory."""
    input_path = Path(input_path)
    return input_path.with_name(cropped_filename(input_path))


def plan_single(input_path: Path, output: Optional[Path] = None) -> PathPlan:
    """Single-file mode: an explicit output path is used verbatim."""
    input_path = Path(input_path)
    output_path = Path(output) if output is not None else default_output_path(input_path)
    return PathPlan(input_path=input_path, output_path=output_path)


def plan_in_directory(input_path: Path, output_dir: Optional[Path] = None) -> PathPlan:
    """Directory mode: output_dir / <stem>_cropped<ext>, or a sibling when no output_dir."""
    input_path = Path(input_path)
    if output_dir is None:
        output_path = default_output_path(input_path)
    else:
        output_path = Path(output_dir) / cropped_filename(input_path)
    return PathPlan(input_path=input_path, output_path=output_path)


def ensure_output_dir(output_dir: Path) -> Path:
    output_dir = Path(output_dir)
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ImageIOError(f"Failed to create output directory {output_dir}: {exc}") from exc
    return output_dir
