"""核心数据模型定义。"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

FileKind = str  # image | pdf | docx | xlsx


@dataclass(frozen=True, slots=True)
class SourceFile:
    """用户选择的源文件，处理过程中不会被修改。"""

    path: Path
    kind: FileKind
    media_type: str

    @property
    def name(self) -> str:
        return self.path.name


@dataclass(slots=True)
class ProcessedFile:
    """处理成功后的输出文件（内存中的字节内容）。"""

    source: SourceFile
    output_name: str
    content: bytes
    media_type: str


@dataclass(slots=True)
class FileOutcome:
    """记录单个文件的处理结果（用于报告/日志）。"""

    source: SourceFile
    status: str
    output_name: Optional[str] = None
    message: Optional[str] = None


@dataclass(slots=True)
class BatchResult:
    """一次批处理的产出，记录按选择顺序排列。"""

    processed: list[ProcessedFile] = field(default_factory=list)
    records: list[FileOutcome] = field(default_factory=list)
    archive_path: Optional[Path] = None

    @property
    def succeeded(self) -> list[FileOutcome]:
        return [record for record in self.records if record.status == "success"]

    @property
    def failed(self) -> list[FileOutcome]:
        return [record for record in self.records if record.status == "error"]
