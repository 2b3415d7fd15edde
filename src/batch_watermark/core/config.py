"""处理任务的配置模型。"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Sequence, Tuple

from batch_watermark.core.exceptions import InvalidConfigurationError

PositionMode = str  # center | tile | diagonal

DEFAULT_WATERMARK_TEXT = "水印"
VALID_POSITIONS = ("center", "tile", "diagonal")


@dataclass(frozen=True, slots=True)
class WatermarkConfig:
    """水印文本与样式配置，单次批处理内不可变。"""

    text: str = DEFAULT_WATERMARK_TEXT
    color: Tuple[int, int, int] = (255, 0, 0)
    opacity: float = 0.3
    position: PositionMode = "center"
    font_path: Optional[Path] = None

    def __post_init__(self) -> None:
        if not self.text or not self.text.strip():
            object.__setattr__(self, "text", DEFAULT_WATERMARK_TEXT)
        if self.position not in VALID_POSITIONS:
            raise InvalidConfigurationError(f"未知的水印位置: {self.position}")
        if not 0.0 <= self.opacity <= 1.0:
            raise InvalidConfigurationError(f"透明度必须位于 0~1 之间: {self.opacity}")
        if len(self.color) != 3 or any(not 0 <= channel <= 255 for channel in self.color):
            raise InvalidConfigurationError(f"颜色必须为 RGB 三元组: {self.color}")


@dataclass(slots=True)
class OutputConfig:
    """输出目录与压缩包命名配置。"""

    output_dir: Path
    archive_prefix: str = "watermarked"
    name_suffix: str = "watermarked"


@dataclass(slots=True)
class JobConfig:
    """单次批处理任务的配置集合。"""

    sources: Sequence[Path]
    output: OutputConfig
    watermark: WatermarkConfig = field(default_factory=WatermarkConfig)
    allow_recursive: bool = True
    report_filename: Optional[str] = None


def opacity_from_percent(percent: float) -> float:
    """将 0~100 的百分比透明度转换为 0~1 的小数。"""

    if not 0 <= percent <= 100:
        raise InvalidConfigurationError(f"透明度百分比必须位于 0~100 之间: {percent}")
    return percent / 100.0
