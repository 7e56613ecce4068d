from __future__ import annotations

import json
import logging
import os
import time
import threading
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from config import CFG

# ------------------------------
# Thread-safe global progress state
# ------------------------------

PROGRESS_LOCK = threading.Lock()
BASE_DIR = Path(__file__).resolve().parent


def _state_file_path() -> Path:
    configured = os.environ.get("PROGRESS_STATE_FILE")
    if configured:
        return Path(configured)
    return BASE_DIR / "logs" / "progress_state.json"


STATE_FILE = _state_file_path()
STATE_FILE_TMP = STATE_FILE.with_name(STATE_FILE.name + ".tmp")
_LAST_STATE_MTIME: float = 0.0


def _init_logger() -> logging.Logger:
    logger = logging.getLogger("solver.search_log")
    if logger.handlers:
        return logger

    log_path = BASE_DIR / CFG.LOG_FILE
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_path, encoding="utf-8")
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
        logger.propagate = False
    except OSError:
        # No writable log location; progress tracking carries on without it.
        logger.handlers.clear()
    return logger


SEARCH_LOGGER = _init_logger()


def _fmt_seconds(seconds: Optional[float]) -> Optional[str]:
    if seconds is None:
        return None
    return f"{max(0.0, float(seconds)):.2f}s"


def log_event(event: str, **fields: Any) -> None:
    if not SEARCH_LOGGER.handlers:
        return
    extras = [
        f"{key}={value}"
        for key, value in fields.items()
        if value is not None and value != ""
    ]
    if extras:
        SEARCH_LOGGER.info("%s | %s", event, " ".join(extras))
    else:
        SEARCH_LOGGER.info("%s", event)


# Single source of truth for the status page
PROGRESS: Dict[str, Any] = {
    "status": "Idle",          # Idle | Solving | Solved | Aborted | Error
    "board_size": 0,
    "pieces": 0,
    "iterations": 0,
    "solutions": 0,
    "pruned": 0,
    "cursors": [],             # [[orientation, x, y], ...] per piece
    "elapsed_start": None,     # t0 (float) when solving started
    "elapsed": 0.0,            # seconds snapshot
    "message": "",
    "done": False,
    "ok": None,
    "run_id": 0,               # monotonically increasing identifier
}


def _persist_locked() -> None:
    global _LAST_STATE_MTIME
    try:
        STATE_FILE.parent.mkdir(parents=True, exist_ok=True)
        with STATE_FILE_TMP.open("w", encoding="utf-8") as fh:
            json.dump(PROGRESS, fh, ensure_ascii=False, separators=(",", ":"))
        STATE_FILE_TMP.replace(STATE_FILE)
        try:
            _LAST_STATE_MTIME = STATE_FILE.stat().st_mtime
        except OSError:
            _LAST_STATE_MTIME = time.time()
    except OSError:
        # Persistence must never break the search.
        pass


def _load_persisted_locked(force: bool = False) -> None:
    global _LAST_STATE_MTIME
    try:
        stat = STATE_FILE.stat()
    except OSError:
        return
    if not force and stat.st_mtime <= _LAST_STATE_MTIME:
        return
    try:
        with STATE_FILE.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
    except (OSError, ValueError):
        return
    if not isinstance(data, dict):
        return
    for key in PROGRESS.keys():
        if key in data:
            PROGRESS[key] = data[key]
    _LAST_STATE_MTIME = stat.st_mtime

# ------------------------------
# Helpers
# ------------------------------

def _touch_elapsed_locked() -> None:
    t0 = PROGRESS.get("elapsed_start")
    if t0 is not None:
        PROGRESS["elapsed"] = time.time() - float(t0)

def reset(board_size: int = 0, pieces: int = 0) -> None:
    with PROGRESS_LOCK:
        new_run_id = int(PROGRESS.get("run_id") or 0) + 1
        PROGRESS.update({
            "status": "Idle",
            "board_size": int(board_size),
            "pieces": int(pieces),
            "iterations": 0,
            "solutions": 0,
            "pruned": 0,
            "cursors": [],
            "elapsed_start": None,
            "elapsed": 0.0,
            "message": "",
            "done": False,
            "ok": None,
            "run_id": new_run_id,
        })
        log_event("Progress reset", run=new_run_id, board=board_size or None, pieces=pieces or None)
        _persist_locked()

def start_timer() -> None:
    with PROGRESS_LOCK:
        PROGRESS["elapsed_start"] = time.time()
        PROGRESS["elapsed"] = 0.0
        log_event("Run timer started", run=PROGRESS.get("run_id"))
        _persist_locked()

# ------------------------------
# Setters
# ------------------------------

def set_status(v: Any) -> None:
    with PROGRESS_LOCK:
        PROGRESS["status"] = str(v)
        _persist_locked()

def set_message(msg: Any) -> None:
    with PROGRESS_LOCK:
        PROGRESS["message"] = "" if msg is None else str(msg)
        _persist_locked()

def record_progress(iterations: int, cursors: Iterable[Iterable[int]], pruned: Optional[int] = None) -> None:
    with PROGRESS_LOCK:
        PROGRESS["iterations"] = int(iterations)
        PROGRESS["cursors"] = [list(c) for c in cursors]
        if pruned is not None:
            PROGRESS["pruned"] = int(pruned)
        _touch_elapsed_locked()
        _persist_locked()

def record_solution(index: int) -> None:
    with PROGRESS_LOCK:
        PROGRESS["solutions"] = int(index)
        _touch_elapsed_locked()
        log_event(
            "Solution found",
            index=index,
            iterations=PROGRESS.get("iterations"),
            elapsed=_fmt_seconds(PROGRESS.get("elapsed")),
        )
        _persist_locked()

def set_done(ok: Optional[bool] = None, *, status: Optional[str] = None, reason: Any = None) -> None:
    """Mark the run complete.

    ``ok`` decides between ``Solved`` and ``Error`` unless an explicit
    ``status`` (e.g. ``"Aborted"``) is supplied.
    """
    with PROGRESS_LOCK:
        _touch_elapsed_locked()
        if status is not None:
            PROGRESS["status"] = str(status)
        elif ok is not None:
            PROGRESS["status"] = "Solved" if ok else "Error"
        elif PROGRESS.get("status") in ("", "Idle", "Solving", None):
            PROGRESS["status"] = "Solved"
        if ok is None:
            ok = PROGRESS["status"] != "Error"
        PROGRESS["ok"] = bool(ok)
        PROGRESS["done"] = True
        if reason is not None:
            PROGRESS["message"] = str(reason)
        log_event(
            "Run finished",
            status=PROGRESS.get("status"),
            ok=PROGRESS.get("ok"),
            solutions=PROGRESS.get("solutions"),
            iterations=PROGRESS.get("iterations"),
            duration=_fmt_seconds(PROGRESS.get("elapsed")),
            message=PROGRESS.get("message"),
        )
        _persist_locked()

# ------------------------------
# Snapshots for the UI
# ------------------------------

def snapshot() -> Dict[str, Any]:
    with PROGRESS_LOCK:
        _load_persisted_locked()
        _touch_elapsed_locked()
        snap = {k: v for k, v in PROGRESS.items() if k != "elapsed_start"}
        snap["cursors"] = [list(c) for c in PROGRESS["cursors"]]
        snap["elapsed_str"] = _fmt_seconds(PROGRESS["elapsed"])
        return snap

def as_json() -> Dict[str, Any]:
    # Alias used by /progress3
    return snapshot()


with PROGRESS_LOCK:
    _load_persisted_locked(force=True)
