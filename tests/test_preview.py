from PIL import Image

from conftest import FakeDetector, face, write_image
from facecrop.cropping.preview import CROP_COLOR, FACE_COLOR, annotate_preview, run_preview
from facecrop.cropping.schemas import CropRect


def test_annotate_preview_draws_on_a_copy():
    image = Image.new("L", (120, 80), 0)

    annotated = annotate_preview(image, [face(50, 30, 20, 20)], CropRect(x=20, y=0, side=80))

    assert annotated.mode == "RGB"
    assert annotated.size == image.size
    assert annotated.getpixel((50, 40)) == FACE_COLOR
    assert annotated.getpixel((20, 40)) == CROP_COLOR
    assert image.getextrema() == (0, 0)


def test_annotate_preview_without_crop_leaves_edges_alone():
    image = Image.new("RGB", (120, 80), (0, 0, 0))

    annotated = annotate_preview(image, [face(50, 30, 20, 20)], None)

    assert annotated.getpixel((0, 0)) == (0, 0, 0)
    assert annotated.getpixel((20, 40)) == (0, 0, 0)


def test_run_preview_single_face_reports_crop(tmp_path, one_face_detector):
    src = write_image(tmp_path / "photo.jpg", size=(120, 80))
    out = tmp_path / "previews" / "photo.png"

    detections, crop = run_preview(src, out, one_face_detector)

    assert len(detections) == 1
    assert (crop.x, crop.y, crop.side) == (20, 0, 80)
    with Image.open(out) as written:
        assert written.size == (120, 80)


def test_run_preview_multiple_faces_has_no_crop(tmp_path):
    src = write_image(tmp_path / "group.png")
    detector = FakeDetector([face(0, 0, 10, 10), face(60, 40, 10, 10)])

    detections, crop = run_preview(src, tmp_path / "group_preview.png", detector)

    assert len(detections) == 2
    assert crop is None
    assert (tmp_path / "group_preview.png").is_file()
