"""处理流水线：筛选、逐个添加水印、打包输出。"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

from batch_watermark.core.config import JobConfig
from batch_watermark.core.exceptions import NoEligibleFilesError
from batch_watermark.core.models import BatchResult, FileOutcome, SourceFile
from batch_watermark.core.output_manager import OutputManager
from batch_watermark.core.progress import ProgressUpdate
from batch_watermark.core.report import write_csv_report
from batch_watermark.core.scanner import collect_source_files
from batch_watermark.processing.worker import process_file

LOGGER = logging.getLogger(__name__)

NO_ELIGIBLE_FILES_MESSAGE = "没有找到支持的文件格式 (PDF, DOCX, XLSX, PNG, JPG)"

ProgressCallback = Optional[Callable[[ProgressUpdate], None]]


@dataclass(slots=True)
class BatchContext:
    """单次批处理的全部运行状态，在流水线内显式传递。"""

    config: JobConfig
    sources: list[SourceFile]
    output_manager: OutputManager
    progress_callback: ProgressCallback = None
    result: BatchResult = field(default_factory=BatchResult)
    completed: int = 0

    @property
    def total(self) -> int:
        return len(self.sources)

    def emit(self, status: str, message: Optional[str] = None, name: Optional[str] = None) -> None:
        if not self.progress_callback:
            return
        self.progress_callback(
            ProgressUpdate(total=self.total, completed=self.completed, message=message, status=status, name=name)
        )


def process_batch(
    config: JobConfig,
    progress_callback: ProgressCallback = None,
    *,
    timestamp_ms: Optional[int] = None,
) -> BatchResult:
    """批量处理入口：逐个添加水印并打包为单个压缩文件。

    没有可处理文件时抛出 NoEligibleFilesError，不产生进度与压缩包。
    """

    LOGGER.info("开始扫描输入路径")
    sources = collect_source_files(config)
    if not sources:
        raise NoEligibleFilesError(NO_ELIGIBLE_FILES_MESSAGE)
    LOGGER.info("发现 %d 个待处理文件", len(sources))

    context = BatchContext(
        config=config,
        sources=sources,
        output_manager=OutputManager(config.output),
        progress_callback=progress_callback,
    )

    for source in context.sources:
        context.emit("pending", name=source.name)

    for source in context.sources:
        _run_one(context, source)

    result = context.result
    if result.processed:
        result.archive_path = context.output_manager.write_archive(result.processed, timestamp_ms)
    else:
        LOGGER.warning("没有成功处理的文件，不生成压缩包")

    if config.report_filename:
        _write_report(context)

    context.emit("done", f"成功处理 {len(result.processed)} 个文件，失败 {len(result.failed)} 个")
    return result


def _run_one(context: BatchContext, source: SourceFile) -> None:
    context.emit("processing", f"处理中 {source.name}", name=source.name)
    try:
        processed = process_file(source, context.config.watermark, context.output_manager.output_name_for)
    except Exception as exc:  # noqa: BLE001
        LOGGER.exception("处理失败：%s", source.path)
        outcome = FileOutcome(source=source, status="error", message=str(exc))
    else:
        context.result.processed.append(processed)
        outcome = FileOutcome(source=source, status="success", output_name=processed.output_name)

    context.result.records.append(outcome)
    context.completed += 1
    label = "完成" if outcome.status == "success" else "失败"
    context.emit(outcome.status, f"{label} {source.name}", name=source.name)


def _write_report(context: BatchContext) -> None:
    output_dir = context.output_manager.output_dir
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
        write_csv_report(context.result.records, output_dir, context.config.report_filename)
    except OSError as exc:
        LOGGER.error("写入报告失败：%s", exc)
