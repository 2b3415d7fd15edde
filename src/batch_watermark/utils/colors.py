"""颜色工具函数。"""

from __future__ import annotations

import re
from typing import Tuple

from batch_watermark.core.exceptions import InvalidConfigurationError

HEX_COLOR_RE = re.compile(r"^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


def parse_hex_color(value: str) -> Tuple[int, int, int]:
    """将 HEX 字符串（#RRGGBB 或 #RGB）解析为 RGB 三元组。"""

    if not value:
        raise InvalidConfigurationError("颜色值不能为空")

    match = HEX_COLOR_RE.match(value.strip())
    if not match:
        raise InvalidConfigurationError(f"无法解析颜色值: {value}")

    hex_value = match.group(1)
    if len(hex_value) == 3:
        hex_value = "".join(ch * 2 for ch in hex_value)

    return tuple(int(hex_value[i : i + 2], 16) for i in (0, 2, 4))  # type: ignore[return-value]


def to_hex_color(rgb: Tuple[int, int, int]) -> str:
    return "#{:02x}{:02x}{:02x}".format(*rgb)


def to_unit_rgb(rgb: Tuple[int, int, int]) -> Tuple[float, float, float]:
    """转换为 reportlab 使用的 0~1 浮点颜色。"""

    r, g, b = rgb
    return r / 255.0, g / 255.0, b / 255.0
