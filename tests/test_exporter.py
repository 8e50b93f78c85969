import os

import piexif
import pytest
from PIL import Image

from tiled_watermark.core.errors import OutputError, UserInputError
from tiled_watermark.core.exporter import dump_debug, output_format, save_image


def _rgba():
    return Image.new("RGBA", (40, 30), (10, 20, 30, 128))


def test_png_keeps_alpha(tmp_path):
    target = tmp_path / "out.png"
    assert save_image(_rgba(), str(target)) == str(target)
    with Image.open(target) as img:
        assert img.mode == "RGBA"
        assert img.size == (40, 30)


def test_jpeg_is_flattened_to_rgb(tmp_path):
    target = tmp_path / "nested" / "out.jpg"
    save_image(_rgba(), str(target), quality=80)
    with Image.open(target) as img:
        assert img.format == "JPEG"
        assert img.mode == "RGB"


def test_unknown_extension_is_rejected(tmp_path):
    with pytest.raises(UserInputError):
        output_format(str(tmp_path / "out.unknownext"))


def test_unwritable_target_reports_path(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x")
    target = blocker / "out.png"
    with pytest.raises(OutputError) as info:
        save_image(_rgba(), str(target))
    assert info.value.path == str(target)
    assert str(target) in str(info.value)


def test_failed_encode_leaves_no_file(tmp_path, monkeypatch):
    def broken_save(self, fp, format=None, **params):
        raise OSError("disk full")

    monkeypatch.setattr(Image.Image, "save", broken_save)
    with pytest.raises(OutputError):
        save_image(_rgba(), str(tmp_path / "out.png"))
    assert os.listdir(tmp_path) == []


def test_exif_is_carried_over(tmp_path):
    exif = {"0th": {}, "Exif": {piexif.ExifIFD.DateTimeOriginal: b"2021:03:04 05:06:07"},
            "GPS": {}, "1st": {}, "thumbnail": None}
    target = tmp_path / "out.jpg"
    save_image(_rgba(), str(target), exif=exif)
    loaded = piexif.load(str(target))
    assert loaded["Exif"][piexif.ExifIFD.DateTimeOriginal] == b"2021:03:04 05:06:07"


def test_dump_debug_writes_png(tmp_path):
    path = dump_debug(_rgba(), str(tmp_path / "debug"), "watermark_raw.png")
    assert os.path.basename(path) == "watermark_raw.png"
    with Image.open(path) as img:
        assert img.format == "PNG"


@pytest.mark.parametrize("name", ["out.psd", "out.fli", "out.pcd"])
def test_read_only_formats_are_rejected(tmp_path, name):
    with pytest.raises(UserInputError, match="不支持写出"):
        output_format(str(tmp_path / name))


def test_encoder_lookup_failure_reports_path(tmp_path, monkeypatch):
    def missing_encoder(self, fp, format=None, **params):
        raise KeyError(format)

    monkeypatch.setattr(Image.Image, "save", missing_encoder)
    target = tmp_path / "out.png"
    with pytest.raises(OutputError) as info:
        save_image(_rgba(), str(target))
    assert str(target) in str(info.value)
    assert os.listdir(tmp_path) == []
