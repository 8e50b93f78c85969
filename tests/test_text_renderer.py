import pytest

from tiled_watermark.core.errors import ResourceError, UserInputError
from tiled_watermark.core.text_renderer import (
    CANVAS_SIZE,
    line_start_y,
    load_font,
    render_text,
    shared_start_x,
)


def test_render_text_fills_fixed_canvas(font):
    img = render_text(["Confidential", "2024"], font, (0, 0, 0, 100))
    assert img.size == CANVAS_SIZE
    assert img.mode == "RGBA"
    lo, hi = img.getchannel("A").getextrema()
    assert lo == 0
    assert 0 < hi <= 100


def test_render_text_draws_near_vertical_centre(font):
    img = render_text(["one line"], font, (0, 0, 0, 255))
    left, top, right, bottom = img.getchannel("A").getbbox()
    assert top < 300 < bottom + 20
    assert left < 500 < right


def test_render_text_rejects_empty_lines(font):
    with pytest.raises(UserInputError):
        render_text([], font, (0, 0, 0, 100))


def test_shared_start_x_averages_offsets():
    # offsets (1000-200)//2 = 400 and (1000-600)//2 = 200
    assert shared_start_x(1000, [200, 600]) == 300
    assert shared_start_x(1000, [400]) == 300


def test_line_start_y_stacks_block():
    # block = (20 + 10) * 3 - 10 = 80 -> start 260
    assert [line_start_y(600, 3, i, 20, 10) for i in range(3)] == [260, 290, 320]


def test_load_font_missing(tmp_path):
    with pytest.raises(ResourceError):
        load_font(str(tmp_path / "missing.ttc"))


def test_load_font_unparseable(tmp_path):
    bogus = tmp_path / "bogus.ttf"
    bogus.write_bytes(b"not a font")
    with pytest.raises(ResourceError):
        load_font(str(bogus))
