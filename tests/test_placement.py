"""水印落点策略的单元测试。"""

from __future__ import annotations

import pytest

from batch_watermark.core.exceptions import InvalidConfigurationError
from batch_watermark.processing.placement import (
    DIAGONAL_FONT_SIZE,
    TILE_FONT_SIZE,
    Placement,
    compute_placements,
    image_base_font_size,
)


@pytest.mark.parametrize("width,height", [(1, 1), (300, 200), (595.28, 841.89)])
def test_center_yields_single_instruction_at_middle(width: float, height: float) -> None:
    placements = compute_placements(width, height, "center", 48)

    assert placements == [Placement(width / 2, height / 2, 48)]


def test_tile_grid_for_500_by_300() -> None:
    placements = compute_placements(500, 300, "tile", 99)

    assert len(placements) == 6
    assert [(p.x, p.y) for p in placements] == [
        (0, 0),
        (0, 150),
        (200, 0),
        (200, 150),
        (400, 0),
        (400, 150),
    ]
    assert {p.font_size for p in placements} == {TILE_FONT_SIZE}


def test_tile_with_zero_size_yields_nothing() -> None:
    assert compute_placements(0, 300, "tile", 20) == []
    assert compute_placements(500, 0, "tile", 20) == []


def test_diagonal_walks_line_from_minus_height() -> None:
    placements = compute_placements(1000, 500, "diagonal", 48)

    assert placements[0] == Placement(-500, -250, DIAGONAL_FONT_SIZE)
    xs = [p.x for p in placements]
    assert all(b - a == 250 for a, b in zip(xs, xs[1:]))
    assert xs[-1] < 1500 <= xs[-1] + 250
    assert all(p.y == p.x * 0.5 for p in placements)


def test_font_sizes_do_not_depend_on_target() -> None:
    for mode in ("tile", "diagonal"):
        as_pdf = compute_placements(800, 600, mode, 48)
        as_image = compute_placements(800, 600, mode, image_base_font_size(800))
        assert as_pdf == as_image


def test_small_sizes_keep_overlapping_instructions() -> None:
    placements = compute_placements(10, 10, "diagonal", 24)

    # x 从 -10 开始，在 x < 20 之前只走一步
    assert placements == [Placement(-10, -5.0, DIAGONAL_FONT_SIZE)]


def test_image_base_font_size_scales_with_width() -> None:
    assert image_base_font_size(100) == 24
    assert image_base_font_size(2000) == 100


def test_unknown_mode_is_rejected() -> None:
    with pytest.raises(InvalidConfigurationError):
        compute_placements(100, 100, "corner", 20)
