"""文件扫描与筛选逻辑。"""

from __future__ import annotations

from pathlib import Path
from typing import Iterator

from batch_watermark.core.config import JobConfig
from batch_watermark.core.models import FileKind, SourceFile

SUPPORTED_EXTENSIONS: dict[str, tuple[FileKind, str]] = {
    ".pdf": ("pdf", "application/pdf"),
    ".docx": ("docx", "application/vnd.openxmlformats-officedocument.wordprocessingml.document"),
    ".xlsx": ("xlsx", "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"),
    ".png": ("image", "image/png"),
    ".jpg": ("image", "image/jpeg"),
    ".jpeg": ("image", "image/jpeg"),
}


def classify(path: Path) -> SourceFile | None:
    """按扩展名（不区分大小写）判断文件类型，不支持时返回 None。"""

    entry = SUPPORTED_EXTENSIONS.get(path.suffix.lower())
    if entry is None:
        return None
    kind, media_type = entry
    return SourceFile(path=path, kind=kind, media_type=media_type)


def _iter_candidate_files(path: Path, recursive: bool) -> Iterator[Path]:
    """遍历路径下的所有文件；目录内按路径排序，保证结果稳定。"""

    if path.is_file():
        yield path
        return

    if not path.is_dir():
        return

    iterator = path.rglob("*") if recursive else path.glob("*")
    for candidate in sorted(iterator, key=lambda p: str(p).lower()):
        if candidate.is_file():
            yield candidate


def collect_source_files(config: JobConfig) -> list[SourceFile]:
    """按选择顺序收集支持的文件，其余文件静默忽略。"""

    collected: list[SourceFile] = []
    seen_paths: set[Path] = set()

    for root in config.sources:
        for candidate in _iter_candidate_files(root.resolve(), config.allow_recursive):
            if candidate in seen_paths:
                continue
            seen_paths.add(candidate)

            source = classify(candidate)
            if source is not None:
                collected.append(source)

    return collected
