"""图片水印绘制与重新编码。"""

from __future__ import annotations

import io
import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional, Sequence

from PIL import Image, ImageDraw, ImageFont

from batch_watermark.core.config import WatermarkConfig
from batch_watermark.core.exceptions import WatermarkToolError
from batch_watermark.processing.placement import Placement, compute_placements, image_base_font_size

LOGGER = logging.getLogger(__name__)

MEDIA_TYPE_FORMATS = {
    "image/png": "PNG",
    "image/jpeg": "JPEG",
}


class ImageWriteError(WatermarkToolError):
    """图片编码失败。"""


CJK_FONT_CANDIDATES = (
    # Linux
    "/usr/share/fonts/opentype/noto/NotoSansCJK-Regular.ttc",
    "/usr/share/fonts/noto-cjk/NotoSansCJK-Regular.ttc",
    "/usr/share/fonts/google-noto-cjk/NotoSansCJK-Regular.ttc",
    "/usr/share/fonts/truetype/wqy/wqy-microhei.ttc",
    "/usr/share/fonts/truetype/wqy/wqy-zenhei.ttc",
    "/usr/share/fonts/wenquanyi/wqy-microhei/wqy-microhei.ttc",
    "/usr/share/fonts/truetype/droid/DroidSansFallbackFull.ttf",
    "/usr/share/fonts/truetype/arphic/uming.ttc",
    # macOS
    "/System/Library/Fonts/PingFang.ttc",
    "/System/Library/Fonts/STHeiti Light.ttc",
    "/Library/Fonts/Arial Unicode.ttf",
    # Windows
    "C:/Windows/Fonts/msyh.ttc",
    "C:/Windows/Fonts/simhei.ttf",
    "C:/Windows/Fonts/simsun.ttc",
)
CJK_FONT_DIRS = ("/usr/share/fonts", "/usr/local/share/fonts", str(Path.home() / ".fonts"), "/Library/Fonts")
CJK_FONT_KEYWORDS = ("cjk", "wqy", "droidsansfallback", "notosanssc", "sourcehansans", "uming", "ukai")


def is_latin_text(text: str) -> bool:
    try:
        text.encode("latin-1")
    except UnicodeEncodeError:
        return False
    return True


@lru_cache(maxsize=8)
def find_cjk_font(
    candidates: Sequence[str] = CJK_FONT_CANDIDATES, font_dirs: Sequence[str] = CJK_FONT_DIRS
) -> Optional[Path]:
    """返回第一个存在的中文字体路径：先查候选列表，再按文件名扫描字体目录。"""

    for candidate in candidates:
        path = Path(candidate)
        if path.is_file():
            return path

    for directory in font_dirs:
        root = Path(directory)
        if not root.is_dir():
            continue
        for path in sorted(root.rglob("*")):
            name = path.name.lower().replace("-", "").replace("_", "")
            if path.suffix.lower() in {".ttf", ".ttc", ".otf"} and any(key in name for key in CJK_FONT_KEYWORDS):
                return path
    return None


def resolve_font_path(
    text: str,
    font_path: Optional[Path],
    candidates: Sequence[str] = CJK_FONT_CANDIDATES,
    font_dirs: Sequence[str] = CJK_FONT_DIRS,
) -> Optional[Path]:
    """确定图片绘制使用的字体：显式指定优先，非 Latin-1 文本再查找系统中文字体。"""

    if font_path is not None or is_latin_text(text):
        return font_path
    found = find_cjk_font(candidates, font_dirs)
    if found is None:
        LOGGER.warning("未找到中文字体，文本 %r 可能显示为方框，可通过 --font 指定字体", text)
    return found


@lru_cache(maxsize=32)
def _load_font(font_path: Optional[Path], size: int) -> ImageFont.ImageFont | ImageFont.FreeTypeFont:
    if font_path is not None:
        try:
            return ImageFont.truetype(str(font_path), size)
        except OSError as exc:
            LOGGER.warning("无法加载字体 %s，改用默认字体: %s", font_path, exc)
    return ImageFont.load_default(size=size)


def draw_watermark(image: Image.Image, config: WatermarkConfig) -> Image.Image:
    """在图片上叠加水印文本，返回新的 RGBA 图像。"""

    base = image.convert("RGBA")
    width, height = base.size
    placements = compute_placements(width, height, config.position, image_base_font_size(width))
    font_path = resolve_font_path(config.text, config.font_path)
    overlay = Image.new("RGBA", base.size, (0, 0, 0, 0))
    _draw_placements(overlay, placements, config, font_path)
    return Image.alpha_composite(base, overlay)


def _draw_placements(
    overlay: Image.Image, placements: Sequence[Placement], config: WatermarkConfig, font_path: Optional[Path]
) -> None:
    draw = ImageDraw.Draw(overlay)
    fill = (*config.color, int(round(255 * config.opacity)))
    height = overlay.height

    for placement in placements:
        font = _load_font(font_path, max(1, int(round(placement.font_size))))
        left, top, right, bottom = draw.textbbox((0, 0), config.text, font=font)
        # 落点坐标为 y 轴向上，转换到图片坐标后以文本包围盒中心对齐
        cx = placement.x
        cy = height - placement.y
        origin = (cx - (left + right) / 2, cy - (top + bottom) / 2)
        draw.text(origin, config.text, fill=fill, font=font)


def encode_image(image: Image.Image, media_type: str, *, keep_alpha: bool) -> bytes:
    """按原始媒体类型重新编码。"""

    image_format = MEDIA_TYPE_FORMATS.get(media_type)
    if not image_format:
        raise ImageWriteError(f"不支持的输出格式: {media_type}")

    save_params: dict = {"optimize": True}
    if image_format == "JPEG":
        save_params.update(quality=95)
        image_to_save = image.convert("RGB")
    else:
        image_to_save = image if keep_alpha else image.convert("RGB")

    buffer = io.BytesIO()
    try:
        image_to_save.save(buffer, format=image_format, **save_params)
    except OSError as exc:
        raise ImageWriteError(f"图片编码失败: {media_type}") from exc
    return buffer.getvalue()


def has_alpha(image: Image.Image) -> bool:
    return image.mode in {"RGBA", "LA", "PA"} or (image.mode == "P" and "transparency" in image.info)
