"""Tests for snakes_ladders.chart."""

from pathlib import Path

import pytest

from snakes_ladders.chart import make_length_chart


def test_chart_saved(tmp_path: Path):
    out = tmp_path / "chart.png"
    path = make_length_chart([12, 30, 30, 45, 80], output_path=str(out))
    assert path == str(out)
    assert out.stat().st_size > 0


def test_single_game_chart(tmp_path: Path):
    out = tmp_path / "one.png"
    make_length_chart([25], output_path=str(out))
    assert out.exists()


def test_empty_chart_rejected(tmp_path: Path):
    with pytest.raises(ValueError):
        make_length_chart([], output_path=str(tmp_path / "none.png"))
