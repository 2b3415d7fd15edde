"""命令行入口。"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)

from batch_watermark.core.config import (
    DEFAULT_WATERMARK_TEXT,
    JobConfig,
    OutputConfig,
    WatermarkConfig,
    opacity_from_percent,
)
from batch_watermark.core.exceptions import InvalidConfigurationError, NoEligibleFilesError
from batch_watermark.core.progress import ProgressUpdate
from batch_watermark.processing.pipeline import process_batch
from batch_watermark.utils.colors import parse_hex_color
from batch_watermark.utils.logging import setup_logging

app = typer.Typer(help="批量为图片与 PDF 添加文字水印并打包下载。")

STATUS_LABELS = {
    "success": "[green]✓ 完成[/green]",
    "error": "[red]✗ 失败[/red]",
}


def _build_progress_callback(progress: Progress):
    task_id: Optional[int] = None

    def callback(update: ProgressUpdate) -> None:
        nonlocal task_id
        if task_id is None:
            task_id = progress.add_task("添加水印", total=update.total)
        progress.update(task_id, completed=update.completed)
        label = STATUS_LABELS.get(update.status)
        if label and update.name:
            progress.console.print(f"{update.name}  {label}")

    return callback


@app.callback()
def main() -> None:
    """批量水印工具。"""


@app.command("run")
def run_cli(  # noqa: PLR0913
    source: List[Path] = typer.Argument(..., help="源文件或目录，可指定多个"),
    output: Path = typer.Option(..., "--output", "-o", help="压缩包输出目录"),
    text: str = typer.Option(DEFAULT_WATERMARK_TEXT, "--text", "-t", help="水印文本"),
    color: str = typer.Option("#ff0000", "--color", "-c", help="水印颜色 (HEX)"),
    opacity: int = typer.Option(30, "--opacity", help="不透明度百分比 0~100"),
    position: str = typer.Option("center", "--position", "-p", help="位置模式 center/tile/diagonal"),
    font: Optional[Path] = typer.Option(None, "--font", help="图片水印使用的 TrueType 字体"),
    allow_recursive: bool = typer.Option(True, "--recursive/--no-recursive", help="是否递归扫描目录"),
    report: Optional[str] = typer.Option(None, "--report", help="CSV 报告文件名，写入输出目录"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="输出调试日志"),
) -> None:
    """执行批量水印处理。"""

    setup_logging(logging.DEBUG if verbose else logging.WARNING)

    try:
        watermark = WatermarkConfig(
            text=text,
            color=parse_hex_color(color),
            opacity=opacity_from_percent(opacity),
            position=position.lower(),
            font_path=font.expanduser().resolve() if font else None,
        )
    except InvalidConfigurationError as exc:
        typer.secho(f"配置错误：{exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc

    job = JobConfig(
        sources=[p.expanduser() for p in source],
        output=OutputConfig(output_dir=output.expanduser().resolve()),
        watermark=watermark,
        allow_recursive=allow_recursive,
        report_filename=report,
    )

    progress = Progress(
        SpinnerColumn(),
        TextColumn("[bold blue]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
    )

    try:
        with progress:
            result = process_batch(job, progress_callback=_build_progress_callback(progress))
    except NoEligibleFilesError as exc:
        typer.secho(str(exc), fg=typer.colors.YELLOW, err=True)
        raise typer.Exit(code=1) from exc

    typer.echo(f"处理完成：成功 {len(result.succeeded)} 个，失败 {len(result.failed)} 个。")
    if any(record.source.kind in {"docx", "xlsx"} for record in result.succeeded):
        typer.echo("注意：DOCX/XLSX 文件未添加水印，仅原样复制。")
    if result.archive_path:
        typer.echo(f"压缩包：{result.archive_path}")


if __name__ == "__main__":
    app()
