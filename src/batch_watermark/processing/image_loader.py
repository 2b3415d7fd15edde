"""图片解码步骤，返回显式的成功/失败结果。"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import Optional

from PIL import Image, ImageOps, UnidentifiedImageError

from batch_watermark.core.exceptions import WatermarkToolError

LOGGER = logging.getLogger(__name__)


class ImageLoadingError(WatermarkToolError):
    """图片加载失败。"""


@dataclass(slots=True)
class DecodeOutcome:
    """解码结果：image 与 error 二者只有一个非空。"""

    image: Optional[Image.Image] = None
    error: Optional[ImageLoadingError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Image.Image:
        """取出图片，失败时抛出记录的异常。"""

        if self.error is not None:
            raise self.error
        assert self.image is not None
        return self.image


def decode_image(data: bytes, name: str = "<memory>") -> DecodeOutcome:
    """解码图片字节并执行 EXIF 旋转校正。

    返回的 Image 为新对象，调用者负责关闭。透明通道保持不变。
    """

    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            # EXIF Orientation 校正
            oriented = ImageOps.exif_transpose(img)
            return DecodeOutcome(image=oriented.copy())
    except (UnidentifiedImageError, OSError) as exc:
        LOGGER.debug("无法识别图像文件 %s: %s", name, exc)
        error = ImageLoadingError(f"无法加载图像: {name}")
        error.__cause__ = exc
        return DecodeOutcome(error=error)
