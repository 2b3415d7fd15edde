"""报告生成工具。"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterable

from batch_watermark.core.models import FileOutcome

HEADER = ["source_path", "kind", "output_name", "status"]


def write_csv_report(outcomes: Iterable[FileOutcome], output_dir: Path, filename: str) -> Path:
    """将每个文件的处理状态写入 CSV 报告。"""

    report_path = output_dir / filename
    with report_path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.writer(handle)
        writer.writerow(HEADER)
        for record in outcomes:
            writer.writerow(
                [
                    str(record.source.path),
                    record.source.kind,
                    record.output_name or "",
                    record.status,
                ]
            )
    return report_path
