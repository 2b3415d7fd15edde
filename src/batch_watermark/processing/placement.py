"""水印落点策略：根据页面/画布尺寸与位置模式计算绘制指令。

坐标统一采用 PDF 约定：原点在左下角，y 轴向上。图片绘制时由调用方
换算为 ``height - y``。所有目标格式共享同一套几何规则。
"""

from __future__ import annotations

from typing import NamedTuple

from batch_watermark.core.config import VALID_POSITIONS
from batch_watermark.core.exceptions import InvalidConfigurationError

TILE_STEP_X = 200
TILE_STEP_Y = 150
TILE_FONT_SIZE = 20

DIAGONAL_STEP = 250
DIAGONAL_SLOPE = 0.5
DIAGONAL_FONT_SIZE = 24

PDF_CENTER_FONT_SIZE = 48
IMAGE_MIN_FONT_SIZE = 24


class Placement(NamedTuple):
    """以 (x, y) 为中心、使用 font_size 绘制一次水印文本。"""

    x: float
    y: float
    font_size: float


def compute_placements(width: float, height: float, mode: str, base_font_size: float) -> list[Placement]:
    """返回按绘制顺序排列的完整指令列表。

    尺寸退化（0 宽或 0 高）时不会报错，可能返回空列表。
    """

    if mode not in VALID_POSITIONS:
        raise InvalidConfigurationError(f"未知的水印位置: {mode}")

    if mode == "tile":
        return _tile(width, height)
    if mode == "diagonal":
        return _diagonal(width, height)
    return [Placement(width / 2, height / 2, base_font_size)]


def image_base_font_size(width: float) -> float:
    """图片居中模式的字号：随宽度缩放，最小 24。"""

    return max(IMAGE_MIN_FONT_SIZE, width / 20)


def _tile(width: float, height: float) -> list[Placement]:
    placements: list[Placement] = []
    x = 0
    while x < width:
        y = 0
        while y < height:
            placements.append(Placement(x, y, TILE_FONT_SIZE))
            y += TILE_STEP_Y
        x += TILE_STEP_X
    return placements


def _diagonal(width: float, height: float) -> list[Placement]:
    placements: list[Placement] = []
    x = -height
    while x < width + height:
        placements.append(Placement(x, x * DIAGONAL_SLOPE, DIAGONAL_FONT_SIZE))
        x += DIAGONAL_STEP
    return placements
