import numpy as np
import pytest

from lindenmayer.errors import TransformStackError
from lindenmayer.geometry.flatten import compute_bounds, segments_to_polylines
from lindenmayer.geometry.turtle import ExecuteContext, Segment, TransformStack, Turtle


class TestTurtle:
    def test_forward_is_local_y(self) -> None:
        turtle = Turtle()
        turtle.forward(2)
        assert np.allclose(turtle.origin, [0, 2, 0])

    def test_rotate_z_then_forward(self) -> None:
        turtle = Turtle()
        turtle.rotate_z(np.pi / 2)
        turtle.forward(1)
        assert np.allclose(turtle.origin, [-1, 0, 0])

    def test_rotate_x_then_forward(self) -> None:
        turtle = Turtle()
        turtle.rotate_x(np.pi / 2)
        turtle.forward(1)
        assert np.allclose(turtle.origin, [0, 0, 1])

    def test_rotations_are_relative(self) -> None:
        turtle = Turtle()
        turtle.rotate_z(np.pi / 2)
        turtle.rotate_x(np.pi / 2)
        # pitching up after turning left still climbs along +Z
        assert np.allclose(turtle.direction(), [0, 0, 1])

    def test_scale(self) -> None:
        turtle = Turtle()
        turtle.scale_by(10)
        turtle.forward(1)
        assert np.allclose(turtle.origin, [0, 10, 0])

    def test_copy_is_independent(self) -> None:
        turtle = Turtle()
        copy = turtle.copy()
        assert copy == turtle
        copy.forward(1)
        copy.rotate_y(1)
        assert copy != turtle
        assert np.allclose(turtle.origin, [0, 0, 0])

    def test_to_dict(self) -> None:
        turtle = Turtle()
        turtle.set_origin([1, 2, 3])
        data = turtle.to_dict()
        assert data["origin"] == [1.0, 2.0, 3.0]
        assert data["rotation"] == np.eye(3).tolist()
        assert data["scale"] == 1.0


class TestTransformStack:
    def test_push_pop_restores(self) -> None:
        stack = TransformStack()
        turtle = Turtle()
        turtle.forward(1)
        stack.push(turtle)
        saved = turtle.copy()
        turtle.rotate_z(1)
        turtle.forward(3)
        assert stack.pop() == saved
        assert len(stack) == 0

    def test_nested_push_pop_restores(self) -> None:
        stack = TransformStack()
        turtle = Turtle()
        turtle.forward(1)
        saved = turtle.copy()
        for angle in (0.3, -0.7, 1.1):
            stack.push(turtle)
            turtle.rotate_z(angle)
            turtle.forward(2)
        for _ in range(3):
            turtle = stack.pop()
        assert turtle == saved
        assert len(stack) == 0

    def test_push_stores_a_copy(self) -> None:
        stack = TransformStack()
        turtle = Turtle()
        stack.push(turtle)
        turtle.forward(1)
        assert np.allclose(stack.pop().origin, [0, 0, 0])

    def test_empty_pop(self) -> None:
        with pytest.raises(TransformStackError):
            TransformStack().pop()


class TestExecuteContext:
    def test_starts_from_a_copy(self) -> None:
        turtle = Turtle()
        context = ExecuteContext(turtle)
        context.turtle.forward(1)
        assert np.allclose(turtle.origin, [0, 0, 0])

    def test_snapshot_and_segments(self) -> None:
        context = ExecuteContext()
        context.snapshot()
        context.elements.append(Segment(np.zeros(3), np.ones(3)))
        context.elements.append("marker")
        assert len(context.snapshots) == 1
        assert [s.to_list() for s in context.segments()] == [[[0.0, 0.0, 0.0], [1.0, 1.0, 1.0]]]


class TestFlatten:
    def segments(self):
        return [
            Segment(np.array([0.0, 0.0, 0.0]), np.array([0.0, 1.0, 0.0])),
            Segment(np.array([0.0, 1.0, 0.0]), np.array([1.0, 1.0, 2.0])),
            Segment(np.array([5.0, 5.0, 0.0]), np.array([5.0, 6.0, 0.0])),
        ]

    def test_chains_until_gap(self) -> None:
        polylines = segments_to_polylines(self.segments())
        assert polylines == [
            [(0.0, 0.0), (0.0, 1.0), (1.0, 1.0)],
            [(5.0, 5.0), (5.0, 6.0)],
        ]
        assert compute_bounds(polylines) == (0.0, 0.0, 5.0, 6.0)

    def test_other_plane(self) -> None:
        polylines = segments_to_polylines(self.segments()[:2], plane="xz")
        assert polylines == [[(0.0, 0.0), (0.0, 0.0), (1.0, 2.0)]]

    def test_bad_plane(self) -> None:
        with pytest.raises(ValueError):
            segments_to_polylines([], plane="ab")

    def test_empty_bounds(self) -> None:
        assert compute_bounds([]) == (0.0, 0.0, 0.0, 0.0)
