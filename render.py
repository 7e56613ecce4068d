import random
from typing import Dict, Sequence, Tuple

from models import EMPTY, Grid, Shape, Tag


def _color(name: str) -> str:
    rng = random.Random(name)
    r = rng.randint(40, 200)
    g = rng.randint(40, 200)
    b = rng.randint(40, 200)
    return f"rgb({r},{g},{b})"


def _shape_color(shape: Shape) -> str:
    if shape.color is None:
        return _color(shape.label)
    return f"#{shape.color:06x}"


def render_solution(cells: Grid, shapes: Sequence[Shape]) -> Tuple[str, str]:
    """Return (svg, legend_html) for a solved board snapshot."""
    by_tag: Dict[Tag, Shape] = {s.tag: s for s in shapes}

    scale = 40
    n = len(cells)
    svg_w = svg_h = n * scale + 2

    rects = []
    for y, row in enumerate(cells):
        for x, tag in enumerate(row):
            if tag == EMPTY:
                fill = "white"
            elif tag in by_tag:
                fill = _shape_color(by_tag[tag])
            else:
                fill = _color(str(tag))
            rects.append(
                f'<rect x="{x * scale + 1}" y="{y * scale + 1}" width="{scale}" height="{scale}" '
                f'fill="{fill}" stroke="black" stroke-width="1"/>'
            )
    frame = f'<rect x="1" y="1" width="{svg_w-2}" height="{svg_h-2}" fill="none" stroke="black" stroke-width="2"/>'
    svg = (
        f'<svg class="layout-svg" xmlns="http://www.w3.org/2000/svg" '
        f'width="{svg_w}" height="{svg_h}" '
        f'viewBox="0 0 {svg_w} {svg_h}" preserveAspectRatio="xMinYMin meet">'
        f'{"".join(rects)}{frame}</svg>'
    )

    legend = "".join(
        f"<li><span class='swatch' style='background:{_shape_color(s)}'></span>{s.label} ({s.size})</li>"
        for s in shapes
    )
    return svg, legend
