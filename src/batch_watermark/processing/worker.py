"""单个文件的处理单元：按类型分派到对应的水印实现。"""

from __future__ import annotations

import logging
from typing import Callable

from batch_watermark.core.config import WatermarkConfig
from batch_watermark.core.models import ProcessedFile, SourceFile
from batch_watermark.processing.image_loader import decode_image
from batch_watermark.processing.image_watermark import draw_watermark, encode_image, has_alpha
from batch_watermark.processing.pdf_watermark import watermark_pdf

LOGGER = logging.getLogger(__name__)

NameFactory = Callable[[str], str]


def process_file(source: SourceFile, config: WatermarkConfig, make_name: NameFactory) -> ProcessedFile:
    """处理单个文件，失败时直接抛出异常由流水线记录。"""

    data = source.path.read_bytes()

    if source.kind == "image":
        content = _process_image(source, data, config)
    elif source.kind == "pdf":
        content = watermark_pdf(data, config)
    else:
        # DOCX/XLSX 原样复制
        LOGGER.warning("%s 为 %s 文件，未添加水印，仅原样复制", source.name, source.kind.upper())
        content = data

    return ProcessedFile(
        source=source,
        output_name=make_name(source.name),
        content=content,
        media_type=source.media_type,
    )


def _process_image(source: SourceFile, data: bytes, config: WatermarkConfig) -> bytes:
    outcome = decode_image(data, source.name)
    image = outcome.unwrap()
    try:
        keep_alpha = has_alpha(image)
        watermarked = draw_watermark(image, config)
        try:
            return encode_image(watermarked, source.media_type, keep_alpha=keep_alpha)
        finally:
            watermarked.close()
    finally:
        image.close()
