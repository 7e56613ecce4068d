"""Helpers for writing solver outputs to disk."""

from __future__ import annotations

import os

from config import CFG
from models import Solution


def _resolve_output_path(base_dir: str, configured_name: str, fallback: str) -> str:
    """Return the absolute path where an output artifact should be written."""

    name = (configured_name or "").strip() or fallback
    if os.path.isabs(name):
        return name
    return os.path.join(base_dir, name)


def solutions_dir(base_dir: str) -> str:
    return _resolve_output_path(base_dir, CFG.SOLUTIONS_DIR, "solutions")


def solution_path(index: int, base_dir: str) -> str:
    return os.path.join(solutions_dir(base_dir), f"{index:02d}.txt")


def layout_path(base_dir: str) -> str:
    return _resolve_output_path(base_dir, CFG.LAYOUT_HTML, "layout_view.html")


def clear_solutions(base_dir: str) -> int:
    """Remove numbered solution files left by an earlier run. Returns how many went."""

    folder = solutions_dir(base_dir)
    if not os.path.isdir(folder):
        return 0
    removed = 0
    for name in os.listdir(folder):
        stem, ext = os.path.splitext(name)
        if ext == ".txt" and stem.isdigit():
            os.remove(os.path.join(folder, name))
            removed += 1
    return removed


def write_solution(solution: Solution, base_dir: str) -> str:
    """Write one rendered solution board to ``<solutions dir>/<NN>.txt``."""

    path = solution_path(solution.index, base_dir)
    os.makedirs(os.path.dirname(path), exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        f.write(solution.text)
    return path


def read_solution(index: int, base_dir: str) -> str:
    with open(solution_path(index, base_dir), "r", encoding="utf-8") as f:
        return f.read()


def write_layout_view_html(svg: str, legend_html: str, base_dir: str, title: str = "Layout View") -> str:
    """Write the rendered SVG/legend preview to the configured HTML file."""

    path = layout_path(base_dir)
    os.makedirs(os.path.dirname(path), exist_ok=True)

    with open(path, "w", encoding="utf-8") as vf:
        vf.write(
            f"""<!doctype html>
<html><head><meta charset='utf-8'><title>{title}</title></head>
<body class='container'>
<h1>{title}</h1>
<section class='card'><div class='gridwrap'>{svg}</div></section>
<section class='card'><h3>Legend</h3><ul>{legend_html}</ul></section>
</body></html>"""
        )
    return path


__all__ = ["solutions_dir", "solution_path", "layout_path", "clear_solutions", "write_solution", "read_solution", "write_layout_view_html"]
