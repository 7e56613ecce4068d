# app.py: background search with progress polling and abort
from __future__ import annotations
import os
import threading
from typing import Any, Dict, List, Optional, Sequence

from flask import Flask, Response, jsonify, request, send_from_directory, url_for

from catalog import reference_shapes
from config import CFG
from errors import ConfigError, SearchBusy
from io_files import clear_solutions, layout_path, read_solution, write_layout_view_html, write_solution
from models import Shape, Solution
from render import render_solution
from shapes import make_shape
from solver.search import SearchContext, search

from progress import (
    reset as progress_reset,
    as_json as progress_json,
    start_timer as progress_start,
    set_status, set_done, set_message, record_progress, record_solution, log_event,
)

BASE_DIR = os.path.dirname(os.path.abspath(__file__))


RUN_LOCK = threading.Lock()
RUN: Dict[str, Any] = {
    "thread": None,
    "abort": threading.Event(),
    "shapes": [],
    "latest": None,     # most recent Solution
}

app = Flask(__name__)


@app.after_request
def _no_cache_progress(resp):
    if request.path == "/progress3":
        resp.headers["Cache-Control"] = "no-store, max-age=0"
        resp.headers["Pragma"] = "no-cache"
        resp.headers["Expires"] = "0"
    return resp


@app.route("/")
def index():
    snap = progress_json()
    return (
        "<!doctype html><html><head><meta charset='utf-8'><title>Polyomino packer</title></head>"
        "<body><h1>Polyomino packer</h1>"
        f"<p>Status: {snap['status']} &middot; solutions: {snap['solutions']} "
        f"&middot; iterations: {snap['iterations']} &middot; elapsed: {snap['elapsed_str']}</p>"
        "<form method='post' action='/solve'><button>Solve</button></form>"
        "<form method='post' action='/abort'><button>Abort</button></form>"
        f"<p><a href='{url_for('result_latest')}'>Latest solution</a></p>"
        "</body></html>"
    )


def _shapes_from_payload(payload: Dict[str, Any]) -> List[Shape]:
    pieces = payload.get("pieces")
    if not pieces:
        return reference_shapes()
    if not isinstance(pieces, list):
        raise ConfigError("'pieces' must be a list of shape descriptions")
    return [make_shape(tag, str(text)) for tag, text in enumerate(pieces, start=1)]


def _board_size_from_payload(payload: Dict[str, Any]) -> int:
    raw = payload.get("board_size")
    if raw is None or raw == "":
        return CFG.BOARD_SIZE
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ConfigError(f"board size must be an integer, got {raw!r}")


def _on_solution(solution: Solution) -> None:
    write_solution(solution, BASE_DIR)
    with RUN_LOCK:
        RUN["latest"] = solution
    record_solution(solution.index)


def _finalize_search_progress(status: str, solutions: int) -> None:
    """Write the terminal run status."""

    if status == "aborted":
        set_done(True, status="Aborted", reason=f"aborted after {solutions} solution(s)")
    else:
        set_done(True, reason=f"search complete: {solutions} solution(s)")


def _run_search(ctx: SearchContext, abort: threading.Event) -> None:
    def _on_progress(iterations, cursors):
        record_progress(iterations, cursors, pruned=ctx.pruned)

    try:
        result = search(
            ctx,
            on_solution=_on_solution,
            on_progress=_on_progress,
            progress_every=CFG.PROGRESS_EVERY,
            abort=abort,
            prune=CFG.PRUNE,
        )
    except Exception as e:
        reason = f"search exception: {type(e).__name__}: {e}"
        log_event("Search crashed", reason=reason)
        set_done(False, reason=reason)
        return
    record_progress(result.iterations, ctx.cursors(), pruned=result.pruned)
    _finalize_search_progress(result.status, result.solutions)


def is_running() -> bool:
    with RUN_LOCK:
        th: Optional[threading.Thread] = RUN["thread"]
        return th is not None and th.is_alive()


def start_search(shapes: Sequence[Shape], board_size: int) -> threading.Thread:
    """
    Validate the inputs and launch the search thread.

    The running check, the context build and the thread registration happen
    under RUN_LOCK, so at most one search is ever live. Raises SearchBusy if
    one is, and ConfigError for bad inputs.
    """
    with RUN_LOCK:
        live: Optional[threading.Thread] = RUN["thread"]
        if live is not None and live.is_alive():
            raise SearchBusy("a search is already running")

        ctx = SearchContext(shapes, board_size)
        abort = threading.Event()
        clear_solutions(BASE_DIR)

        progress_reset(board_size=board_size, pieces=len(ctx.pieces))
        progress_start()
        set_status("Solving")

        th = threading.Thread(target=_run_search, args=(ctx, abort), daemon=True)
        RUN.update({"thread": th, "abort": abort, "shapes": list(shapes), "latest": None})
        th.start()
    return th


@app.route("/solve", methods=["POST"])
def solve():
    payload = request.get_json(silent=True) or {}
    try:
        shapes = _shapes_from_payload(payload)
        board_size = _board_size_from_payload(payload)
        start_search(shapes, board_size)
    except SearchBusy as e:
        return jsonify({"ok": False, "error": str(e)}), 409
    except ConfigError as e:
        set_message(str(e))
        return jsonify({"ok": False, "error": str(e)}), 400
    return jsonify({"ok": True, "progress_url": url_for("progress3")}), 202


@app.route("/abort", methods=["POST"])
def abort():
    with RUN_LOCK:
        RUN["abort"].set()
    return jsonify({"ok": True, "running": is_running()})


@app.route("/solutions/<int:index>")
def solution_text(index: int):
    with RUN_LOCK:
        latest: Optional[Solution] = RUN["latest"]
    if latest is None or not 1 <= index <= latest.index:
        return Response(f"no solution {index}\n", status=404, mimetype="text/plain")
    try:
        text = read_solution(index, BASE_DIR)
    except FileNotFoundError:
        return Response(f"no solution {index}\n", status=404, mimetype="text/plain")
    return Response(text, mimetype="text/plain")


@app.route("/result/latest")
def result_latest():
    with RUN_LOCK:
        latest: Optional[Solution] = RUN["latest"]
        shapes = list(RUN["shapes"])
    if latest is None:
        return Response("no solution yet\n", status=404, mimetype="text/plain")
    svg, legend = render_solution(latest.cells, shapes)
    path = write_layout_view_html(svg, legend, BASE_DIR, title=f"Solution {latest.index}")
    with open(path, "r", encoding="utf-8") as fh:
        return Response(fh.read(), mimetype="text/html")


@app.route("/download/html")
def download_html():
    full = os.path.abspath(layout_path(BASE_DIR))
    return send_from_directory(os.path.dirname(full), os.path.basename(full), as_attachment=True)


@app.route("/progress3")
def progress3():
    return jsonify(progress_json())


if __name__ == "__main__":
    app.run(debug=False)
