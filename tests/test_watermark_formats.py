"""图片、PDF 与文档直通处理测试。"""

from __future__ import annotations

import io
from pathlib import Path

import pytest
from PIL import Image, ImageChops
from pypdf import PdfReader

from batch_watermark.core.config import WatermarkConfig
from batch_watermark.core.models import SourceFile
from batch_watermark.core.output_manager import watermarked_name
from batch_watermark.core.scanner import classify
from batch_watermark.processing.image_loader import ImageLoadingError, decode_image
from batch_watermark.processing.image_watermark import draw_watermark, find_cjk_font, resolve_font_path
from batch_watermark.processing.pdf_watermark import CJK_FONT, LATIN_FONT, select_font, watermark_pdf
from batch_watermark.processing.worker import process_file

RED_TEXT = WatermarkConfig(text="TEST", color=(255, 0, 0), opacity=1.0, position="center")


def _source(path: Path) -> SourceFile:
    source = classify(path)
    assert source is not None
    return source


def test_decode_reports_error_instead_of_raising() -> None:
    outcome = decode_image(b"not an image", "broken.png")

    assert not outcome.ok
    assert outcome.image is None
    with pytest.raises(ImageLoadingError):
        outcome.unwrap()


def test_center_watermark_is_drawn_around_middle() -> None:
    original = Image.new("RGB", (300, 200), "white")

    result = draw_watermark(original, RED_TEXT)

    assert result.size == original.size
    bbox = ImageChops.difference(original, result.convert("RGB")).getbbox()
    assert bbox is not None
    left, top, right, bottom = bbox
    assert left < 150 < right
    assert top < 100 < bottom


def test_zero_opacity_leaves_pixels_untouched() -> None:
    original = Image.new("RGB", (120, 80), "white")
    config = WatermarkConfig(text="TEST", opacity=0.0, position="tile")

    result = draw_watermark(original, config)

    assert ImageChops.difference(original, result.convert("RGB")).getbbox() is None


def test_explicit_font_path_takes_precedence(tmp_path: Path) -> None:
    chosen = tmp_path / "chosen.ttf"

    assert resolve_font_path("水印", chosen, candidates=()) == chosen
    assert resolve_font_path("TEST", None, candidates=(str(chosen),)) is None


def test_chinese_text_uses_first_available_cjk_font(tmp_path: Path) -> None:
    fake_font = tmp_path / "cjk.ttc"
    fake_font.write_bytes(b"")
    candidates = (str(tmp_path / "missing.ttc"), str(fake_font))

    assert resolve_font_path("水印", None, candidates=candidates, font_dirs=()) == fake_font
    assert resolve_font_path("水印", None, candidates=(str(tmp_path / "missing.ttc"),), font_dirs=()) is None


def test_default_text_is_drawn_on_image() -> None:
    original = Image.new("RGB", (400, 200), "white")

    result = draw_watermark(original, WatermarkConfig(opacity=1.0))

    assert ImageChops.difference(original, result.convert("RGB")).getbbox() is not None


@pytest.mark.skipif(find_cjk_font() is None, reason="系统中没有可用的中文字体")
def test_default_text_renders_distinct_glyphs_on_image() -> None:
    original = Image.new("RGB", (400, 200), "white")

    default_text = draw_watermark(original, WatermarkConfig(opacity=1.0))
    other_text = draw_watermark(original, WatermarkConfig(text="口口", opacity=1.0))

    assert ImageChops.difference(default_text, other_text).getbbox() is not None


def test_png_keeps_format_size_and_alpha(make_image) -> None:
    path = make_image("logo.png", size=(240, 160), color=(0, 0, 255, 128), mode="RGBA")

    processed = process_file(_source(path), RED_TEXT, watermarked_name)

    assert processed.output_name == "logo_watermarked.png"
    assert processed.media_type == "image/png"
    with Image.open(io.BytesIO(processed.content)) as img:
        assert img.format == "PNG"
        assert img.size == (240, 160)
        assert img.mode == "RGBA"


def test_jpeg_is_reencoded_as_jpeg(make_image) -> None:
    path = make_image("photo.jpg", size=(400, 300))

    processed = process_file(_source(path), WatermarkConfig(text="TEST", position="diagonal"), watermarked_name)

    with Image.open(io.BytesIO(processed.content)) as img:
        assert img.format == "JPEG"
        assert img.mode == "RGB"
        assert img.size == (400, 300)


def test_corrupted_image_raises(tmp_path: Path) -> None:
    path = tmp_path / "broken.png"
    path.write_text("not an image")

    with pytest.raises(ImageLoadingError):
        process_file(_source(path), RED_TEXT, watermarked_name)


@pytest.mark.filterwarnings("error::DeprecationWarning")
def test_pdf_keeps_pages_and_sizes(pdf_bytes) -> None:
    data = pdf_bytes([(400, 300), (200, 500)])

    result = PdfReader(io.BytesIO(watermark_pdf(data, RED_TEXT)))

    assert len(result.pages) == 2
    sizes = [(float(p.mediabox.width), float(p.mediabox.height)) for p in result.pages]
    assert sizes == [(400.0, 300.0), (200.0, 500.0)]
    assert "TEST" in result.pages[0].extract_text()


@pytest.mark.parametrize("position", ["center", "tile", "diagonal"])
def test_pdf_every_position_produces_valid_document(pdf_bytes, position: str) -> None:
    data = pdf_bytes([(612, 792)])
    config = WatermarkConfig(text="TEST", position=position, opacity=0.5)

    result = PdfReader(io.BytesIO(watermark_pdf(data, config)))

    assert len(result.pages) == 1


def test_default_chinese_text_uses_cid_font(pdf_bytes) -> None:
    assert select_font("水印") == CJK_FONT
    assert select_font("Confidential") == LATIN_FONT

    data = pdf_bytes([(300, 300)])
    result = PdfReader(io.BytesIO(watermark_pdf(data, WatermarkConfig())))
    assert len(result.pages) == 1


@pytest.mark.parametrize("name", ["report.docx", "sheet.xlsx"])
def test_office_documents_pass_through_unchanged(tmp_path: Path, name: str) -> None:
    path = tmp_path / name
    payload = b"PK\x03\x04 not really an office document"
    path.write_bytes(payload)

    processed = process_file(_source(path), RED_TEXT, watermarked_name)

    assert processed.content == payload
    assert processed.output_name == watermarked_name(name)
