"""Tests for the drag controller state machine."""

import numpy as np
import pytest

from shapeplay.config import PRESET_STANDARD
from shapeplay.drag import (
    IDLE, DragController, Handle, HandleKind, PointerDown, PointerLeave,
    PointerMove, apply_drag, control_handles, hit_test, transition,
)
from shapeplay.shapes import Circle, Point, Rectangle, create_shape


@pytest.fixture
def ctrl():
    return DragController(PRESET_STANDARD, edge_handles=True)


@pytest.fixture
def rect():
    return create_shape("rectangle")


def _aligned(rect):
    tl, tr, br, bl = rect.vertices
    return tl.y == tr.y and bl.y == br.y and tl.x == bl.x and tr.x == br.x


class TestHitTesting:
    def test_vertex_hit(self):
        tri = create_shape("triangle")
        handle, _ = hit_test(tri, Point(152, 103), 15)
        assert handle == Handle(HandleKind.VERTEX, 0)

    def test_miss(self):
        assert hit_test(create_shape("triangle"), Point(400, 350), 15) is None

    def test_handle_order(self, rect):
        kinds = [h.kind for h, _ in control_handles(rect)]
        assert kinds == [HandleKind.VERTEX] * 4 + [HandleKind.EDGE_MIDPOINT] * 4

    def test_first_match_wins_over_nearest(self):
        # vertex 0 and vertex 1 both within range; vertex 1 is nearer
        tri = create_shape("triangle").with_vertex(1, Point(160, 100))
        handle, _ = hit_test(tri, Point(158, 100), 15)
        assert handle.index == 0

    def test_vertex_beats_edge_midpoint(self):
        # shrink so the top edge midpoint sits within range of a corner
        small = Rectangle.from_corners(100, 100, 110, 150)
        handle, _ = hit_test(small, Point(106, 100), 15)
        assert handle.kind is HandleKind.VERTEX

    def test_circle_center_before_radius(self):
        circle = Circle(Point(200, 150), 20)
        handle, _ = hit_test(circle, Point(210, 150), 15)
        assert handle.kind is HandleKind.CENTER

    def test_edge_handles_disabled(self, rect):
        assert len(control_handles(rect, edge_handles=False)) == 4
        assert hit_test(rect, Point(175, 100), 15, edge_handles=False) is None


class TestTransitions:
    def test_idle_to_dragging(self, ctrl):
        tri = create_shape("triangle")
        assert ctrl.pointer_down(tri, 150, 100)
        assert ctrl.active_handle == Handle(HandleKind.VERTEX, 0)

    def test_pointer_down_miss_stays_idle(self, ctrl):
        assert not ctrl.pointer_down(create_shape("triangle"), 400, 350)
        assert not ctrl.is_dragging

    def test_pointer_up_and_leave(self, ctrl):
        tri = create_shape("triangle")
        ctrl.pointer_down(tri, 150, 100)
        ctrl.pointer_up()
        assert ctrl.state == IDLE
        ctrl.pointer_down(tri, 150, 100)
        ctrl.pointer_leave()
        assert not ctrl.is_dragging

    def test_move_while_idle_does_not_edit(self, ctrl):
        tri = create_shape("triangle")
        assert ctrl.pointer_move(tri, 300, 300) is tri

    def test_hover_tracks_handle(self, ctrl):
        tri = create_shape("triangle")
        ctrl.pointer_move(tri, 250, 198)
        assert ctrl.hovered_handle == Handle(HandleKind.VERTEX, 1)
        ctrl.pointer_move(tri, 400, 350)
        assert ctrl.hovered_handle is None

    def test_hover_keeps_drag(self, ctrl):
        tri = create_shape("triangle")
        ctrl.pointer_down(tri, 150, 100)
        assert ctrl.hover(tri, 250, 200) == Handle(HandleKind.VERTEX, 1)
        assert ctrl.active_handle == Handle(HandleKind.VERTEX, 0)

    def test_pure_transition(self):
        tri = create_shape("triangle")
        state, shape = transition(IDLE, tri, PointerDown(150, 100))
        assert state.is_dragging and shape is tri
        state, shape = transition(state, shape, PointerMove(160, 120))
        assert shape.vertices[0] == Point(160, 120)
        state, _ = transition(state, shape, PointerLeave())
        assert state == IDLE

    def test_unknown_event(self):
        with pytest.raises(TypeError):
            transition(IDLE, create_shape("triangle"), "click")


class TestTriangleDrag:
    def test_vertex_moves_alone(self, ctrl):
        tri = create_shape("triangle")
        ctrl.pointer_down(tri, 150, 100)
        moved = ctrl.pointer_move(tri, 180, 60)
        assert moved.vertices[0] == Point(180, 60)
        assert moved.vertices[1:] == tri.vertices[1:]

    def test_grab_offset_preserved(self, ctrl):
        tri = create_shape("triangle")
        ctrl.pointer_down(tri, 155, 105)
        moved = ctrl.pointer_move(tri, 205, 155)
        assert moved.vertices[0] == Point(200, 150)

    def test_vertex_clamped(self, ctrl):
        tri = create_shape("triangle")
        ctrl.pointer_down(tri, 150, 100)
        moved = ctrl.pointer_move(tri, -500, 9000)
        assert moved.vertices[0] == Point(10, 390)

    def test_edge_translates_both_endpoints(self):
        tri = create_shape("triangle")
        moved = apply_drag(tri, Handle(HandleKind.EDGE_MIDPOINT, 1), Point(150, 150))
        # edge 1 joins (250,200) and (50,200); midpoint (150,200) moved up 50
        assert moved.vertices[1] == Point(250, 150)
        assert moved.vertices[2] == Point(50, 150)
        assert moved.vertices[0] == tri.vertices[0]

    def test_edge_translation_clamped(self):
        tri = create_shape("triangle")
        moved = apply_drag(tri, Handle(HandleKind.EDGE_MIDPOINT, 1), Point(150, 1000))
        assert moved.vertices[1].y == 390 and moved.vertices[2].y == 390


class TestRectangleDrag:
    @pytest.mark.parametrize("index", [0, 1, 2, 3])
    def test_corner_preserves_alignment(self, rect, index):
        moved = apply_drag(rect, Handle(HandleKind.VERTEX, index), Point(300, 320))
        assert _aligned(moved)
        assert moved.vertices[index] == Point(300, 320)
        opposite = (index + 2) % 4
        assert moved.vertices[opposite] == rect.vertices[opposite]

    def test_top_left_rule(self, rect):
        moved = apply_drag(rect, Handle(HandleKind.VERTEX, 0), Point(50, 60))
        assert moved.vertices == (Point(50, 60), Point(250, 60), Point(250, 200), Point(50, 200))

    def test_random_corner_sequence_stays_aligned(self, rect):
        rng = np.random.default_rng(11)
        shape = rect
        for _ in range(300):
            handle = Handle(HandleKind.VERTEX, int(rng.integers(4)))
            shape = apply_drag(shape, handle, Point(*rng.uniform(-50, 650, 2)))
            assert _aligned(shape)

    def test_edges_preserve_alignment(self, rect):
        rng = np.random.default_rng(5)
        shape = rect
        for _ in range(100):
            handle = Handle(HandleKind.EDGE_MIDPOINT, int(rng.integers(4)))
            shape = apply_drag(shape, handle, Point(*rng.uniform(0, 600, 2)))
            assert _aligned(shape)

    def test_top_edge_moves_only_y(self, rect):
        moved = apply_drag(rect, Handle(HandleKind.EDGE_MIDPOINT, 0), Point(999, 50))
        assert moved.vertices[0] == Point(100, 50)
        assert moved.vertices[1] == Point(250, 50)
        assert moved.vertices[2:] == rect.vertices[2:]


class TestCircleDrag:
    def test_center_respects_radius(self, ctrl):
        circle = create_shape("circle")
        ctrl.pointer_down(circle, 200, 150)
        moved = ctrl.pointer_move(circle, 0, 0)
        assert moved.center == Point(90, 90)
        assert moved.radius == circle.radius

    def test_radius_uses_x_only(self, ctrl):
        circle = create_shape("circle")
        ctrl.pointer_down(circle, 280, 150)
        assert ctrl.active_handle.kind is HandleKind.RADIUS
        moved = ctrl.pointer_move(circle, 300, 10)
        assert moved.radius == 100
        assert moved.center == circle.center

    def test_radius_min_and_max(self):
        circle = create_shape("circle")
        handle = Handle(HandleKind.RADIUS)
        assert apply_drag(circle, handle, Point(201, 150)).radius == 20
        # center (200,150) is 140px from the top/bottom margins
        assert apply_drag(circle, handle, Point(590, 150)).radius == 140

    def test_foreign_handle_is_noop(self):
        circle = create_shape("circle")
        assert apply_drag(circle, Handle(HandleKind.VERTEX, 0), Point(0, 0)) is circle
        tri = create_shape("triangle")
        assert apply_drag(tri, Handle(HandleKind.RADIUS), Point(0, 0)) is tri
