"""
Run options read from YAML.

generations: 3
seed: 0
origin: [0, 0, 0]
rotation: [0, 0, 0]     # radians about x, y, z
scale: 1.0
svg:
  size: [800, 800]
  margin: 20
  stroke: black
  stroke_width: 1
  plane: xy             # xy, xz or yz
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from ..errors import ConfigError
from ..geometry.turtle import DEFAULT_SEED, Turtle
from ..grammar.lsystem import MAX_GENERATIONS


@dataclass
class SvgOptions:
    size: Tuple[int, int] = (800, 800)
    margin: float = 20
    stroke: str = "black"
    stroke_width: float = 1
    plane: str = "xy"


@dataclass
class RunOptions:
    generations: int = 3
    seed: int = DEFAULT_SEED
    origin: List[float] = field(default_factory=lambda: [0.0, 0.0, 0.0])
    rotation: List[float] = field(default_factory=lambda: [0.0, 0.0, 0.0])
    scale: float = 1.0
    svg: SvgOptions = field(default_factory=SvgOptions)

    def start_turtle(self) -> Turtle:
        turtle = Turtle()
        turtle.scale_by(self.scale)
        turtle.set_origin(self.origin)
        x, y, z = self.rotation
        turtle.rotate_z(z)
        turtle.rotate_x(x)
        turtle.rotate_y(y)
        return turtle


def _number(x: Any, path: str) -> float:
    if isinstance(x, bool) or not isinstance(x, (int, float)):
        raise ConfigError(f"{path} must be a number")
    return float(x)


def _integer(x: Any, path: str) -> int:
    if isinstance(x, bool) or not isinstance(x, int):
        raise ConfigError(f"{path} must be an integer")
    return x


def _vector(x: Any, path: str, n: int) -> List[float]:
    if not isinstance(x, (list, tuple)) or len(x) != n:
        raise ConfigError(f"{path} must be a list of {n} numbers")
    return [_number(v, f"{path}[{i}]") for i, v in enumerate(x)]


def parse_options(data: Optional[Dict[str, Any]]) -> RunOptions:
    data = data or {}
    if not isinstance(data, dict):
        raise ConfigError("options must be a mapping")
    opts = RunOptions()
    if "generations" in data:
        opts.generations = _integer(data["generations"], "generations")
        if not 0 <= opts.generations <= MAX_GENERATIONS:
            raise ConfigError(f"generations must be between 0 and {MAX_GENERATIONS}")
    if "seed" in data:
        opts.seed = _integer(data["seed"], "seed")
    if "origin" in data:
        opts.origin = _vector(data["origin"], "origin", 3)
    if "rotation" in data:
        opts.rotation = _vector(data["rotation"], "rotation", 3)
    if "scale" in data:
        opts.scale = _number(data["scale"], "scale")

    svg = data.get("svg") or {}
    if not isinstance(svg, dict):
        raise ConfigError("svg must be a mapping")
    if "size" in svg:
        w, h = _vector(svg["size"], "svg.size", 2)
        opts.svg.size = (int(w), int(h))
    if "margin" in svg:
        opts.svg.margin = _number(svg["margin"], "svg.margin")
    if "stroke" in svg:
        opts.svg.stroke = str(svg["stroke"])
    if "stroke_width" in svg:
        opts.svg.stroke_width = _number(svg["stroke_width"], "svg.stroke_width")
    if "plane" in svg:
        if svg["plane"] not in ("xy", "xz", "yz"):
            raise ConfigError("svg.plane must be one of xy, xz, yz")
        opts.svg.plane = svg["plane"]
    return opts


def load_options(path: Optional[Path]) -> RunOptions:
    if path is None:
        return RunOptions()
    try:
        data = yaml.safe_load(Path(path).read_text())
    except yaml.YAMLError as e:
        raise ConfigError(f"could not read options {path}: {e}") from None
    return parse_options(data)
