from pathlib import Path

import numpy as np
import pytest
from PIL import Image

from facecrop.cropping.schemas import BoundingBox


class FakeDetector:
    """Returns canned detections and records the grayscale frames it saw."""

    def __init__(self, faces=None, by_size=None):
        self.faces = faces if faces is not None else []
        self.by_size = by_size or {}
        self.calls = []

    def detect(self, gray: np.ndarray) -> list:
        self.calls.append(gray.shape)
        height, width = gray.shape
        return list(self.by_size.get((width, height), self.faces))


def face(x, y, w, h, score=3.5) -> BoundingBox:
    return BoundingBox(x=x, y=y, width=w, height=h, score=score)


def write_image(path: Path, size=(120, 80), color=(200, 150, 100), mode="RGB") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new(mode, size, color).save(path)
    return path


@pytest.fixture
def one_face_detector():
    return FakeDetector([face(50, 20, 20, 20)])
