import pytest

from conftest import face
from facecrop.cropping.geometry import compute_crop_rect


def test_centered_face_in_square_image_uses_whole_image():
    crop = compute_crop_rect(100, 100, face(40, 40, 20, 20))

    assert (crop.x, crop.y) == (0, 0)
    assert crop.side == 100


def test_side_is_shorter_dimension():
    assert compute_crop_rect(300, 200, face(140, 90, 20, 20)).side == 200
    assert compute_crop_rect(200, 300, face(90, 140, 20, 20)).side == 200


def test_face_centered_in_wide_image():
    crop = compute_crop_rect(300, 100, face(140, 40, 20, 20))

    assert (crop.x, crop.y, crop.side) == (100, 0, 100)


def test_left_edge_face_clamps_to_zero():
    crop = compute_crop_rect(300, 100, face(0, 30, 20, 20))

    assert crop.x == 0
    assert crop.y == 0


def test_right_edge_face_clamps_to_width_minus_side():
    crop = compute_crop_rect(300, 100, face(270, 30, 30, 30))

    assert crop.x == 300 - 100


def test_bottom_edge_face_clamps_to_height_minus_side():
    crop = compute_crop_rect(100, 400, face(40, 380, 20, 20))

    assert crop.y == 400 - 100
    assert crop.x == 0


def test_center_uses_truncating_division():
    # center_x = 11 + 5 // 2 = 13, origin = 13 - 10 // 2 = 8
    crop = compute_crop_rect(40, 10, face(11, 0, 5, 5))

    assert crop.x == 8


@pytest.mark.parametrize("width,height", [(1, 1), (640, 480), (480, 640), (1000, 37), (37, 1000)])
@pytest.mark.parametrize("rel", [(0.0, 0.0), (0.5, 0.5), (0.99, 0.01), (0.2, 0.95), (1.2, 1.2)])
def test_crop_always_inside_image(width, height, rel):
    bbox = face(int(width * rel[0]), int(height * rel[1]), max(1, width // 5), max(1, height // 5))

    crop = compute_crop_rect(width, height, bbox)

    assert crop.x >= 0 and crop.y >= 0
    assert crop.x + crop.side <= width
    assert crop.y + crop.side <= height
    assert crop.side == min(width, height)


@pytest.mark.parametrize("width,height", [(0, 10), (10, 0), (-5, 10)])
def test_non_positive_dimensions_rejected(width, height):
    with pytest.raises(ValueError):
        compute_crop_rect(width, height, face(0, 0, 1, 1))


def test_crop_box_is_pillow_tuple():
    crop = compute_crop_rect(300, 100, face(140, 40, 20, 20))

    assert crop.box() == (100, 0, 200, 100)
