"""测试公用的样例文件生成工具。"""

from __future__ import annotations

import io
from pathlib import Path
from typing import Sequence, Tuple

import pytest
from PIL import Image
from reportlab.pdfgen import canvas


def make_pdf_bytes(page_sizes: Sequence[Tuple[float, float]]) -> bytes:
    buffer = io.BytesIO()
    c = canvas.Canvas(buffer, pagesize=page_sizes[0])
    for width, height in page_sizes:
        c.setPageSize((width, height))
        c.setFont("Helvetica", 12)
        c.drawString(20, 20, "body")
        c.showPage()
    c.save()
    return buffer.getvalue()


@pytest.fixture
def pdf_bytes():
    return make_pdf_bytes


@pytest.fixture
def make_image(tmp_path: Path):
    def _make(name: str, size: Tuple[int, int] = (300, 200), color="white", mode: str = "RGB") -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        Image.new(mode, size, color).save(path)
        return path

    return _make


@pytest.fixture
def make_pdf(tmp_path: Path):
    def _make(name: str, page_sizes: Sequence[Tuple[float, float]] = ((400, 300),)) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(make_pdf_bytes(page_sizes))
        return path

    return _make
