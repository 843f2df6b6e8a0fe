import pytest
from PIL import Image

# EXIF tag ids used to build fixtures
ORIENTATION = 0x0112
MODEL = 0x0110
EXIF_IFD = 0x8769
DATE_TIME_ORIGINAL = 0x9003
BODY_SERIAL = 0xA431


def write_jpeg(path, orientation=None, model=None, capture=None, serial=None, with_exif=True):
    """Writes a tiny real JPEG, optionally carrying the given EXIF fields."""
    img = Image.new("RGB", (8, 8), "white")
    if not with_exif:
        img.save(path, "JPEG")
        return path

    exif = Image.Exif()
    if orientation is not None:
        exif[ORIENTATION] = orientation
    if model is not None:
        exif[MODEL] = model

    sub_ifd = {}
    if capture is not None:
        sub_ifd[DATE_TIME_ORIGINAL] = capture
    if serial is not None:
        sub_ifd[BODY_SERIAL] = serial
    if sub_ifd:
        exif[EXIF_IFD] = sub_ifd

    img.save(path, "JPEG", exif=exif)
    return path


@pytest.fixture
def make_jpeg(tmp_path):
    """Factory: make_jpeg("a.jpg", orientation=1, ...) -> Path"""
    def _make(name="photo.jpg", **kwargs):
        return write_jpeg(tmp_path / name, **kwargs)
    return _make


@pytest.fixture
def full_jpeg(make_jpeg):
    return make_jpeg(
        "full.jpg",
        orientation=1,
        model="Canon EOS 5D Mark IV",
        capture="2020:08:13 10:57:07",
        serial="012345678901",
    )
