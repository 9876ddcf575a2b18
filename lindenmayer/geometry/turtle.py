"""
Turtle graphics state.

The turtle moves relative to itself: forward is +Y in its local frame and every
rotation is post-multiplied onto the accumulated orientation.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from ..errors import TransformStackError

DEFAULT_SEED = 0
FORWARD_AXIS = np.array([0.0, 1.0, 0.0])


def rotation_x(angle: float) -> np.ndarray:
    c, s = np.cos(angle), np.sin(angle)
    return np.array([[1.0, 0.0, 0.0], [0.0, c, -s], [0.0, s, c]])


def rotation_y(angle: float) -> np.ndarray:
    c, s = np.cos(angle), np.sin(angle)
    return np.array([[c, 0.0, s], [0.0, 1.0, 0.0], [-s, 0.0, c]])


def rotation_z(angle: float) -> np.ndarray:
    c, s = np.cos(angle), np.sin(angle)
    return np.array([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]])


@dataclass(eq=False)
class Turtle:
    rotation: np.ndarray = field(default_factory=lambda: np.eye(3))
    scale: float = 1.0
    origin: np.ndarray = field(default_factory=lambda: np.zeros(3))

    def forward(self, length: float) -> None:
        """Move along the local forward axis."""
        self.origin = self.origin + self.transform(FORWARD_AXIS * length)

    def rotate_x(self, angle: float) -> None:
        self.rotation = self.rotation @ rotation_x(angle)

    def rotate_y(self, angle: float) -> None:
        self.rotation = self.rotation @ rotation_y(angle)

    def rotate_z(self, angle: float) -> None:
        self.rotation = self.rotation @ rotation_z(angle)

    def set_origin(self, position: Sequence[float]) -> None:
        self.origin = np.array(position, dtype=float)

    def scale_by(self, factor: float) -> None:
        self.scale *= factor

    def transform(self, vector: np.ndarray) -> np.ndarray:
        return self.scale * (self.rotation @ vector)

    def direction(self) -> np.ndarray:
        return self.rotation @ FORWARD_AXIS

    def copy(self) -> "Turtle":
        return Turtle(self.rotation.copy(), self.scale, self.origin.copy())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "origin": self.origin.tolist(),
            "rotation": self.rotation.tolist(),
            "scale": self.scale,
        }

    def __eq__(self, other) -> bool:
        if not isinstance(other, Turtle):
            return NotImplemented
        return (
            self.scale == other.scale
            and np.array_equal(self.origin, other.origin)
            and np.array_equal(self.rotation, other.rotation)
        )

    __hash__ = None


class TransformStack:
    """LIFO of saved turtle states, used by bracketed sub-paths."""

    def __init__(self):
        self._transforms: List[Turtle] = []

    def push(self, turtle: Turtle) -> None:
        self._transforms.append(turtle.copy())

    def pop(self) -> Turtle:
        if not self._transforms:
            raise TransformStackError("cannot pop from an empty transform stack")
        return self._transforms.pop()

    def __len__(self) -> int:
        return len(self._transforms)


@dataclass(eq=False)
class Segment:
    start: np.ndarray
    end: np.ndarray

    def to_list(self) -> List[List[float]]:
        return [self.start.tolist(), self.end.tolist()]


class ExecuteContext:
    """State of one `run`: turtle, saved transforms, history and output."""

    def __init__(self, turtle: Optional[Turtle] = None, seed: int = DEFAULT_SEED):
        self.turtle = turtle.copy() if turtle is not None else Turtle()
        self.transform_stack = TransformStack()
        # one turtle copy per alphabet step
        self.snapshots: List[Turtle] = []
        self.elements: List[Any] = []
        self.rng = np.random.default_rng(seed)

    def snapshot(self) -> None:
        self.snapshots.append(self.turtle.copy())

    def segments(self) -> List[Segment]:
        return [e for e in self.elements if isinstance(e, Segment)]
