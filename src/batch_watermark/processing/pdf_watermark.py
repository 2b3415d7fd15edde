"""PDF 水印：reportlab 生成覆盖层，pypdf 合并到每一页。"""

from __future__ import annotations

import io
import logging

from pypdf import PdfReader, PdfWriter
from pypdf.errors import PdfReadError
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.cidfonts import UnicodeCIDFont
from reportlab.pdfgen import canvas

from batch_watermark.core.config import WatermarkConfig
from batch_watermark.core.exceptions import WatermarkToolError
from batch_watermark.processing.placement import PDF_CENTER_FONT_SIZE, compute_placements
from batch_watermark.utils.colors import to_unit_rgb

LOGGER = logging.getLogger(__name__)

LATIN_FONT = "Helvetica-Bold"
CJK_FONT = "STSong-Light"


class PdfWatermarkError(WatermarkToolError):
    """PDF 读取或写入失败。"""


def select_font(text: str) -> str:
    """Latin-1 文本使用标准字体，其余（如中文）使用内置 CID 字体。"""

    try:
        text.encode("latin-1")
    except UnicodeEncodeError:
        if CJK_FONT not in pdfmetrics.getRegisteredFontNames():
            pdfmetrics.registerFont(UnicodeCIDFont(CJK_FONT))
        return CJK_FONT
    return LATIN_FONT


def build_overlay(width: float, height: float, config: WatermarkConfig) -> bytes:
    """渲染与页面同尺寸的单页水印覆盖层。"""

    font_name = select_font(config.text)
    buffer = io.BytesIO()
    c = canvas.Canvas(buffer, pagesize=(width, height))
    c.saveState()
    c.setFillColorRGB(*to_unit_rgb(config.color))
    c.setFillAlpha(config.opacity)

    for placement in compute_placements(width, height, config.position, PDF_CENTER_FONT_SIZE):
        c.setFont(font_name, placement.font_size)
        # 基线下移约 1/3 字号，使文本在落点处垂直居中
        c.drawCentredString(placement.x, placement.y - placement.font_size / 3, config.text)

    c.restoreState()
    c.showPage()
    c.save()
    return buffer.getvalue()


def watermark_pdf(data: bytes, config: WatermarkConfig) -> bytes:
    """对 PDF 每一页叠加水印，返回新的 PDF 字节。"""

    try:
        reader = PdfReader(io.BytesIO(data))
        pages = list(reader.pages)
    except (PdfReadError, ValueError, OSError) as exc:
        raise PdfWatermarkError(f"无法解析 PDF: {exc}") from exc

    writer = PdfWriter()
    for index, page in enumerate(pages):
        box = page.mediabox
        width = float(box.width)
        height = float(box.height)
        LOGGER.debug("第 %d 页尺寸 %.1fx%.1f", index + 1, width, height)

        overlay_page = PdfReader(io.BytesIO(build_overlay(width, height, config))).pages[0]
        # 覆盖层以 (0, 0) 为原点，mediabox 偏移时需要平移
        if box.left or box.bottom:
            overlay_page.add_transformation((1, 0, 0, 1, float(box.left), float(box.bottom)))
        writer.add_page(page).merge_page(overlay_page)

    out = io.BytesIO()
    writer.write(out)
    return out.getvalue()
