"""
Face detection adapter around an OpenCV Haar cascade.

The cascade is loaded from bytes. cv2.CascadeClassifier only accepts a
filesystem path, so the bytes are written once per run to a temporary file
that lives for the whole run and is removed on every exit path:

    with open_detector() as detector:
        faces = detector.detect(gray)

Tuning is fixed at construction time (see DetectorConfig) and is never
changed per image.
"""

import os
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Iterator, Optional

import cv2
import numpy as np

from facecrop.cropping.errors import ModelError
from facecrop.cropping.schemas import BoundingBox

MODEL_PACKAGE = "facecrop.detection.models"
DEFAULT_CASCADE = "haarcascade_frontalface_default.xml"


@dataclass(frozen=True)
class DetectorConfig:
    """Detector tuning constants."""
    min_face_size: int = 20
    score_threshold: float = 2.0
    pyramid_scale_factor: float = 0.8
    slide_window_step: tuple = (4, 4)
    min_neighbors: int = 3

    def __post_init__(self):
        if self.min_face_size <= 0:
            raise ValueError(f"min_face_size must be > 0 ({self.min_face_size})")
        if not 0.0 < self.pyramid_scale_factor < 1.0:
            raise ValueError(
                f"pyramid_scale_factor must be in (0, 1) ({self.pyramid_scale_factor})"
            )
        if len(self.slide_window_step) != 2 or min(self.slide_window_step) <= 0:
            raise ValueError(f"slide_window_step must be two positive ints ({self.slide_window_step})")

    @property
    def cascade_scale_factor(self) -> float:
        # OpenCV grows the search window per level instead of shrinking the image
        return 1.0 / self.pyramid_scale_factor


def default_model_resource():
    """Frontal-face cascade shipped inside the package."""
    return resources.files(MODEL_PACKAGE).joinpath(DEFAULT_CASCADE)


def load_model_bytes(path: Optional[Path] = None) -> bytes:
    """
    Read cascade model bytes.

    Args:
        path: Cascade XML file; defaults to the frontal-face cascade shipped with facecrop

    Returns:
        Raw model bytes
    """
    source = Path(path) if path is not None else DEFAULT_CASCADE
    try:
        if path is None:
            source = default_model_resource()
        data = source.read_bytes()
    except (OSError, ModuleNotFoundError) as exc:
        raise ModelError(f"Failed to read detection model {source}: {exc}") from exc
    if not data:
        raise ModelError(f"Detection model is empty: {source}")
    return data


@contextmanager
def materialized_model(model_bytes: bytes, suffix: str = ".xml") -> Iterator[Path]:
    """Write model bytes to a temp file, yield its path, remove it on exit."""
    try:
        fd, name = tempfile.mkstemp(prefix="facecrop-model-", suffix=suffix)
    except OSError as exc:
        raise ModelError(f"Failed to create temp file for model: {exc}") from exc

    path = Path(name)
    try:
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(model_bytes)
        except OSError as exc:
            raise ModelError(f"Failed to write model bytes: {exc}") from exc
        yield path
    finally:
        path.unlink(missing_ok=True)


class FaceDetector:
    """Runs the cascade on grayscale images and returns scored bounding boxes."""

    def __init__(self, model_path: Path, config: Optional[DetectorConfig] = None):
        self.config = config or DetectorConfig()
        try:
            self._cascade = cv2.CascadeClassifier(str(model_path))
        except cv2.error as exc:
            raise ModelError(f"Failed to create face detector: {exc}") from exc
        if self._cascade.empty():
            raise ModelError(f"Failed to create face detector from {model_path}")

    def detect(self, gray: np.ndarray) -> list:
        """
        Detect faces in a grayscale image.

        Args:
            gray: 2-D uint8 array (H x W)

        Returns:
            list[BoundingBox] with the cascade level weight as score, in detector order
        """
        if gray.ndim != 2 or gray.dtype != np.uint8:
            raise ValueError(f"Expected a 2-D uint8 grayscale image, got {gray.dtype} {gray.shape}")

        size = self.config.min_face_size
        rects, _, weights = self._cascade.detectMultiScale3(
            gray,
            scaleFactor=self.config.cascade_scale_factor,
            minNeighbors=self.config.min_neighbors,
            minSize=(size, size),
            outputRejectLevels=True,
        )
        if len(rects) == 0:
            return []

        weights = np.asarray(weights, dtype=float).reshape(-1)
        faces = []
        for (x, y, w, h), score in zip(rects, weights):
            if score < self.config.score_threshold:
                continue
            faces.append(BoundingBox(
                x=int(x), y=int(y), width=int(w), height=int(h), score=round(float(score), 2),
            ))
        return faces


@contextmanager
def open_detector(model_bytes: Optional[bytes] = None,
                  config: Optional[DetectorConfig] = None) -> Iterator[FaceDetector]:
    """One temp model file and one detector for the duration of the block."""
    if model_bytes is None:
        model_bytes = load_model_bytes()
    with materialized_model(model_bytes) as model_path:
        yield FaceDetector(model_path, config)


def enhance_contrast(gray: np.ndarray, clip_limit: float = 2.0, grid_size: int = 8) -> np.ndarray:
    """
    Apply CLAHE (Contrast Limited Adaptive Histogram Equalization) to a grayscale image.

    Recovers facial detail in backlit or underexposed photos before detection.
    """
    clahe = cv2.createCLAHE(clipLimit=clip_limit, tileGridSize=(grid_size, grid_size))
    return clahe.apply(gray)
