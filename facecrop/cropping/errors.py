"""Exception types raised by the face cropping pipeline."""


class FaceCropError(Exception):
    """Base class for every error the cropping pipeline reports per file."""


class ImageIOError(FaceCropError):
    """An image or directory could not be read, written or created."""


class PathError(FaceCropError):
    """An output path could not be derived from the input path."""


class ModelError(FaceCropError):
    """The detection model could not be materialized or loaded."""


class DetectionValidationError(FaceCropError):
    """The detector did not find exactly one face."""

    def __init__(self, message: str, count: int):
        super().__init__(message)
        self.count = count
