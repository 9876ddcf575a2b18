import dataclasses
import json
import logging
from enum import Enum
from pathlib import Path
from typing import Optional, List, Dict, Any

import typer

# Library imports
from ..actions.default_actions import register_default_actions   # DrawForward, Rotate*, Push/Pop
from ..actions.registry import ActionResolver
from ..dsl.lexer import TokenKind, lex
from ..dsl.parser import parse
from ..errors import LSystemError
from ..geometry.flatten import segments_to_polylines
from ..geometry.turtle import ExecuteContext
from ..grammar.lsystem import LSystem
from .options import RunOptions, load_options
# svgwrite is imported inside `preview` to keep CLI import light

app = typer.Typer(help="L-system DSL CLI")


# ---------------------------
# Helpers
# ---------------------------

def _node_to_json(node: Any) -> Any:
    """Convert AST dataclasses to plain JSON-able values, tagging each node with its type."""
    if dataclasses.is_dataclass(node):
        out: Dict[str, Any] = {"type": type(node).__name__}
        for f in dataclasses.fields(node):
            out[f.name] = _node_to_json(getattr(node, f.name))
        return out
    if isinstance(node, Enum):
        return node.name
    if isinstance(node, (list, tuple)):
        return [_node_to_json(n) for n in node]
    return node


def _context_to_json(lsystem: LSystem, generations: int, context: ExecuteContext) -> Dict[str, Any]:
    return {
        "name": lsystem.name,
        "generations": generations,
        "snapshots": [t.to_dict() for t in context.snapshots],
        "segments": [s.to_list() for s in context.segments()],
        "turtle": context.turtle.to_dict(),
    }


def _load(script: Path) -> LSystem:
    item = parse(lex(script.read_text(encoding="utf-8")))
    return LSystem.from_item(item)


def _merge(opts: RunOptions, generations: Optional[int], seed: Optional[int]) -> RunOptions:
    if generations is not None:
        opts.generations = generations
    if seed is not None:
        opts.seed = seed
    return opts


def _abort(err: LSystemError):
    typer.echo(err.format(), err=True)
    raise typer.Exit(code=1)


# ---------------------------
# Commands
# ---------------------------

@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging")):
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


@app.command()
def tokens(script: Path = typer.Argument(..., exists=True, dir_okay=False, help="L-system script")):
    """Print the token stream of a script (whitespace and comments omitted)."""
    try:
        toks = lex(script.read_text(encoding="utf-8"))
    except LSystemError as e:
        _abort(e)
    for tok in toks:
        if tok.kind not in (TokenKind.SPACE, TokenKind.COMMENT):
            typer.echo(f"{tok.position}\t{tok.kind.value}\t{tok.text}")


@app.command("parse")
def parse_cmd(
    script: Path = typer.Argument(..., exists=True, dir_okay=False, help="L-system script"),
    out: Optional[Path] = typer.Option(None, help="Write the AST as JSON here instead of stdout"),
):
    """Parse a script and dump its AST as JSON."""
    try:
        item = parse(lex(script.read_text(encoding="utf-8")))
    except LSystemError as e:
        _abort(e)
    payload = json.dumps(_node_to_json(item), indent=2)
    if out is None:
        typer.echo(payload)
        return
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(payload)
    typer.echo(f"Wrote AST to {out}")


@app.command()
def generate(
    script: Path = typer.Argument(..., exists=True, dir_okay=False, help="L-system script"),
    generations: int = typer.Option(3, "--generations", "-n", min=0, max=255, help="Rewriting rounds"),
):
    """Expand the axiom and print the resulting symbol string."""
    try:
        alphabet = _load(script).generate(generations)
    except LSystemError as e:
        _abort(e)
    typer.echo(str(alphabet))
    typer.echo(f"{len(alphabet)} symbols after {generations} generations", err=True)


@app.command()
def run(
    script: Path = typer.Argument(..., exists=True, dir_okay=False, help="L-system script"),
    out: Path = typer.Option(..., help="Output trace JSON"),
    options: Optional[Path] = typer.Option(None, exists=True, dir_okay=False, help="Run options YAML"),
    generations: Optional[int] = typer.Option(None, "--generations", "-n", min=0, max=255),
    seed: Optional[int] = typer.Option(None, help="Seed for random parameter ranges"),
):
    """
    Generate and execute a script with the default actions.
    Writes one turtle snapshot per symbol plus the drawn segments.
    """
    try:
        opts = _merge(load_options(options), generations, seed)
        lsystem = _load(script)
        alphabet = lsystem.generate(opts.generations)
        resolver = register_default_actions(ActionResolver())
        context = lsystem.run(resolver, alphabet, opts.start_turtle(), opts.seed)
    except LSystemError as e:
        _abort(e)

    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(json.dumps(_context_to_json(lsystem, opts.generations, context), indent=2))
    typer.echo(f"Wrote trace with {len(context.snapshots)} snapshots to {out}")


@app.command()
def preview(
    script: Path = typer.Argument(..., exists=True, dir_okay=False, help="L-system script"),
    out: Path = typer.Option(..., help="Output directory for the SVG preview"),
    options: Optional[Path] = typer.Option(None, exists=True, dir_okay=False, help="Run options YAML"),
    generations: Optional[int] = typer.Option(None, "--generations", "-n", min=0, max=255),
    seed: Optional[int] = typer.Option(None, help="Seed for random parameter ranges"),
):
    """Run a script and draw its segments to <out>/<name>.svg."""
    from ..preview.to_svg import polylines_to_svg  # import here to keep CLI import light

    try:
        opts = _merge(load_options(options), generations, seed)
        lsystem = _load(script)
        alphabet = lsystem.generate(opts.generations)
        resolver = register_default_actions(ActionResolver())
        context = lsystem.run(resolver, alphabet, opts.start_turtle(), opts.seed)
    except LSystemError as e:
        _abort(e)

    polylines: List = segments_to_polylines(context.segments(), plane=opts.svg.plane)
    out.mkdir(parents=True, exist_ok=True)
    svg_path = out / f"{lsystem.name or 'lsystem'}.svg"
    polylines_to_svg(
        polylines,
        str(svg_path),
        title=f"{lsystem.name} n={opts.generations}",
        page_size=opts.svg.size,
        margin=opts.svg.margin,
        stroke=opts.svg.stroke,
        stroke_width=opts.svg.stroke_width,
    )
    typer.echo(f"Wrote {svg_path}")


if __name__ == "__main__":
    app()
