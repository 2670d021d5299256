import logging
import pytest

from PIL import Image
from img_resizer.utils.exceptions import ResizeError
from img_resizer.resizer import ResizeOutcome, exit_status, resize_image, target_size


@pytest.mark.parametrize(
    "width, height, expected",
    [
        (200, 0, (200, 150)),
        (0, 150, (200, 150)),
        (50, 70, (50, 70)),
        (0, 0, (400, 300)),
        (1, 0, (1, 1)),
    ],
)
def test_target_size(width, height, expected):
    assert target_size((400, 300), width, height) == expected


def test_target_size_rejects_negative():
    with pytest.raises(ResizeError):
        target_size((400, 300), -1, 0)


def test_width_only_keeps_aspect_ratio(tmp_path, make_image):
    source = make_image(tmp_path / "source.png")
    output = tmp_path / "result.png"

    outcome = resize_image(source, 200, 0, output)

    assert outcome.ok
    assert outcome.size == (200, 150)
    with Image.open(output) as image:
        assert image.size == (200, 150)


def test_height_only_keeps_aspect_ratio(tmp_path, make_image):
    source = make_image(tmp_path / "source.png")
    output = tmp_path / "result.png"

    assert resize_image(source, 0, 150, output).ok
    with Image.open(output) as image:
        assert image.size == (200, 150)


def test_both_dimensions_are_exact(tmp_path, make_image):
    source = make_image(tmp_path / "source.png")
    output = tmp_path / "result.png"

    assert resize_image(source, 50, 70, output).ok
    with Image.open(output) as image:
        assert image.size == (50, 70)


def test_zero_by_zero_keeps_source_size(tmp_path, make_image):
    source = make_image(tmp_path / "source.png")
    output = tmp_path / "copy.png"

    outcome = resize_image(source, 0, 0, output)

    assert outcome.ok
    with Image.open(output) as image:
        assert image.size == (400, 300)


def test_format_follows_output_extension(tmp_path, make_image):
    source = make_image(tmp_path / "source.png", mode="RGBA")
    output = tmp_path / "result.jpg"

    assert resize_image(source, 100, 0, output).ok
    with Image.open(output) as image:
        assert image.format == "JPEG"
        assert image.mode == "RGB"


def test_missing_source_fails_without_output(tmp_path, caplog):
    output = tmp_path / "result.png"

    with caplog.at_level(logging.ERROR):
        outcome = resize_image(tmp_path / "missing.png", 100, 0, output)

    assert not outcome.ok
    assert not output.exists()
    assert "imgResizer: Could not find file" in caplog.text


def test_unreadable_source_fails(tmp_path):
    source = tmp_path / "notes.png"
    source.write_text("definitely not an image")
    output = tmp_path / "result.png"

    outcome = resize_image(source, 100, 0, output)

    assert not outcome.ok
    assert "Unknown format" in outcome.error
    assert not output.exists()


def test_unknown_output_extension_fails(tmp_path, make_image):
    source = make_image(tmp_path / "source.png")
    output = tmp_path / "result.unknownext"

    outcome = resize_image(source, 100, 0, output)

    assert not outcome.ok
    assert not output.exists()


def test_missing_output_directory_fails(tmp_path, make_image):
    source = make_image(tmp_path / "source.png")

    outcome = resize_image(source, 100, 0, tmp_path / "nope" / "result.png")

    assert not outcome.ok
    assert "Cannot save" in outcome.error


def test_negative_dimension_fails(tmp_path, make_image):
    source = make_image(tmp_path / "source.png")
    output = tmp_path / "result.png"

    outcome = resize_image(source, -10, 0, output)

    assert not outcome.ok
    assert not output.exists()


def test_exit_status():
    good = ResizeOutcome("a.png", "b.png", size=(1, 1))
    bad = ResizeOutcome("a.png", "b.png", error="boom")

    assert exit_status([]) == 0
    assert exit_status([good, good]) == 0
    assert exit_status([good, bad]) == 1
