from typing import List, Tuple
import svgwrite

from ..geometry.flatten import Point, compute_bounds


def polylines_to_svg(polylines: List[List[Point]], filename: str, title: str = "",
                     page_size: Tuple[int, int] = (800, 800), margin: float = 20,
                     stroke: str = "black", stroke_width: float = 1):
    dwg = svgwrite.Drawing(filename, size=(page_size[0], page_size[1]))
    minx, miny, maxx, maxy = compute_bounds(polylines)
    w = max(maxx - minx, 1e-9); h = max(maxy - miny, 1e-9)
    # uniform fit inside the margins, y flipped so +y points up
    k = min((page_size[0] - 2 * margin) / w, (page_size[1] - 2 * margin) / h)

    def to_page(p: Point) -> Point:
        return (round(margin + (p[0] - minx) * k, 3), round(page_size[1] - margin - (p[1] - miny) * k, 3))

    for pl in polylines:
        if len(pl) < 2:
            continue
        dwg.add(dwg.polyline(points=[to_page(p) for p in pl], fill="none",
                             stroke=stroke, stroke_width=stroke_width))
    if title:
        dwg.add(dwg.text(title, insert=(margin, margin), font_size="12px"))
    dwg.save()
    return filename
