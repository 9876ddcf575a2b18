from __future__ import annotations
from typing import List, Sequence, Tuple
import math

from .turtle import Segment

Point = Tuple[float, float]

PLANES = {"xy": (0, 1), "xz": (0, 2), "yz": (1, 2)}


def _project(p, plane: str) -> Point:
    i, j = PLANES[plane]
    return (float(p[i]), float(p[j]))


def segments_to_polylines(segments: Sequence[Segment], plane: str = "xy", tol: float = 1e-6) -> List[List[Point]]:
    """Chain consecutive segments into polylines; a gap (e.g. after a pop) starts a new one."""
    if plane not in PLANES:
        raise ValueError(f"plane must be one of {sorted(PLANES)}, got {plane!r}")
    polylines: List[List[Point]] = []
    pen = None
    for seg in segments:
        a = _project(seg.start, plane); b = _project(seg.end, plane)
        if pen is None or math.hypot(a[0]-pen[0], a[1]-pen[1]) > tol:
            polylines.append([a])
        polylines[-1].append(b)
        pen = b
    return polylines


def compute_bounds(polylines: List[List[Point]]) -> Tuple[float, float, float, float]:
    xs = [x for pl in polylines for x, _ in pl]
    ys = [y for pl in polylines for _, y in pl]
    if not xs:
        return (0.0, 0.0, 0.0, 0.0)
    return (min(xs), min(ys), max(xs), max(ys))
