"""Tests for frame capture, GIF export, the comparison chart and the demo."""

import numpy as np
import pytest
from PIL import Image

from shapeplay.demo import run_demo, solve_by_bisection
from shapeplay.drag import PointerDown, PointerMove
from shapeplay.session import PlaygroundSession
from shapeplay.shapes import create_shape
from shapeplay.viz import (
    comparison_rows, frame_from_render, plot_shape_comparison, record_session, save_gif,
)


@pytest.fixture
def session():
    return PlaygroundSession(rng=np.random.default_rng(0))


class TestFrames:
    def test_caption_strip_extends_height(self):
        img = np.zeros((40, 60, 3), dtype=np.float32)
        assert frame_from_render(img).size == (60, 40)
        assert frame_from_render(img, ["a", "b"]).size[1] > 40

    def test_record_one_frame_per_commit(self, session):
        frames = record_session(session)
        session.dispatch_all([PointerDown(150, 100), PointerMove(150, 80), PointerMove(150, 60)])
        assert len(frames) == 2
        assert all(isinstance(f, Image.Image) for f in frames)

    def test_save_gif(self, session, tmp_path):
        frames = record_session(session)
        session.dispatch_all([PointerDown(150, 100), PointerMove(150, 80), PointerMove(150, 60)])
        path = save_gif(frames, str(tmp_path / "out" / "drag.gif"))
        with Image.open(path) as gif:
            assert gif.n_frames == 2


class TestComparison:
    def test_rows_most_recent_first(self):
        history = [create_shape("triangle"), create_shape("rectangle"), create_shape("circle")]
        rows = comparison_rows(create_shape("rectangle"), history)
        assert [r[0] for r in rows] == ["Current Shape", "Shape 3", "Shape 2", "Shape 1"]
        assert rows[1][1] == "circle"
        assert rows[0][2] == pytest.approx(150.0)

    def test_rows_limited(self):
        history = [create_shape("triangle")] * 5
        assert len(comparison_rows(create_shape("circle"), history, last=3)) == 4

    def test_chart_written(self, tmp_path):
        path = plot_shape_comparison(
            create_shape("circle"), [create_shape("triangle")], str(tmp_path / "cmp.png"),
        )
        assert (tmp_path / "cmp.png").exists() and path.endswith("cmp.png")


class TestDemo:
    def test_bisection_without_challenge(self, session):
        assert not solve_by_bisection(session)

    @pytest.mark.parametrize("seed", [0, 1, 2])
    def test_run_demo_solves_easy(self, tmp_path, seed):
        session, frames = run_demo(
            difficulty="easy", seed=seed, save_path=str(tmp_path / "demo.gif"),
            chart_path=str(tmp_path / "cmp.png"),
        )
        assert session.solved
        assert session.progression.score > 0
        assert frames and (tmp_path / "demo.gif").exists()
        assert (tmp_path / "cmp.png").exists()
