"""输出命名与压缩包写入模块。"""

from __future__ import annotations

import logging
import time
import zipfile
from pathlib import Path
from typing import Iterable, Optional

from batch_watermark.core.config import OutputConfig
from batch_watermark.core.exceptions import ArchiveWriteError
from batch_watermark.core.models import ProcessedFile

LOGGER = logging.getLogger(__name__)


def watermarked_name(filename: str, suffix: str = "watermarked") -> str:
    """在扩展名前插入后缀，仅最后一段视为扩展名。

    ``a.b.png`` -> ``a.b_watermarked.png``
    """

    stem, dot, ext = filename.rpartition(".")
    if not dot or not stem:
        return f"{filename}_{suffix}"
    return f"{stem}_{suffix}.{ext}"


class OutputManager:
    """负责输出目录与压缩包生成。"""

    def __init__(self, config: OutputConfig) -> None:
        self.config = config
        self.output_dir = config.output_dir.resolve()

    def output_name_for(self, filename: str) -> str:
        return watermarked_name(filename, self.config.name_suffix)

    def archive_path(self, timestamp_ms: Optional[int] = None) -> Path:
        """生成 ``<prefix>_<毫秒时间戳>.zip`` 路径。"""

        if timestamp_ms is None:
            timestamp_ms = int(time.time() * 1000)
        return self.output_dir / f"{self.config.archive_prefix}_{timestamp_ms}.zip"

    def write_archive(self, files: Iterable[ProcessedFile], timestamp_ms: Optional[int] = None) -> Path:
        """把所有处理结果写入单个 zip，条目名即输出文件名（不检查重名）。"""

        destination = self.archive_path(timestamp_ms)
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            with zipfile.ZipFile(destination, "w", compression=zipfile.ZIP_DEFLATED) as archive:
                for item in files:
                    archive.writestr(item.output_name, item.content)
        except (OSError, zipfile.BadZipFile) as exc:
            raise ArchiveWriteError(f"写入压缩包失败: {destination}") from exc

        LOGGER.info("压缩包已生成：%s", destination)
        return destination
