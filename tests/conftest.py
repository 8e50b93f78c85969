import pytest
from PIL import Image, ImageFont


@pytest.fixture(scope="session")
def font_path(tmp_path_factory):
    """Pillow's bundled FreeType font written out as a font file."""
    font = ImageFont.load_default(size=24)
    data = getattr(font, "font_bytes", None)
    if not isinstance(font, ImageFont.FreeTypeFont) or not data:
        pytest.skip("Pillow was built without FreeType support")
    path = tmp_path_factory.mktemp("fonts") / "default.ttf"
    path.write_bytes(data)
    return str(path)


@pytest.fixture
def font(font_path):
    return ImageFont.truetype(font_path, 24.4)


@pytest.fixture
def white_png(tmp_path):
    path = tmp_path / "input.png"
    Image.new("RGB", (500, 500), (255, 255, 255)).save(path)
    return str(path)


def block_canvas(size, box, fill=(255, 0, 0, 255), background=(0, 0, 0, 0)):
    img = Image.new("RGBA", size, background)
    img.paste(Image.new("RGBA", (box[2] - box[0], box[3] - box[1]), fill), box[:2])
    return img
