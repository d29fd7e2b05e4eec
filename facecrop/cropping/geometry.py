"""
Square crop geometry around a detected face.

The crop side is always min(width, height), so the square fits along the
shorter axis. The square is centered on the face and then clamped to the
image: a face near an edge still yields a full-size crop, just not a
perfectly centered one.
"""

from facecrop.cropping.schemas import BoundingBox, CropRect


def compute_crop_rect(width: int, height: int, bbox: BoundingBox) -> CropRect:
    """
    Compute the square crop for a single face.

    Args:
        width: Image width in pixels (> 0)
        height: Image height in pixels (> 0)
        bbox: The unique face detection

    Returns:
        CropRect fully contained in [0, width) x [0, height)
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")

    side = min(width, height)

    center_x = bbox.x + bbox.width // 2
    center_y = bbox.y + bbox.height // 2

    origin_x = max(0, center_x - side // 2)
    origin_y = max(0, center_y - side // 2)

    # Right/bottom edge clamp
    if origin_x + side > width:
        origin_x = width - side
    if origin_y + side > height:
        origin_y = height - side

    return CropRect(x=origin_x, y=origin_y, side=side)
