# config.py
import os

# ======= Board =======
BOARD_SIZE = int(os.getenv("PZ_BOARD_SIZE", "8"))

# ======= Search knobs =======
# Connectivity pruning can be switched off to compare node counts.
PRUNE          = int(os.getenv("PZ_PRUNE", "1")) != 0
PROGRESS_EVERY = int(os.getenv("PZ_PROGRESS_EVERY", "100000"))
CURSOR_EVERY   = int(os.getenv("PZ_CURSOR_EVERY", "10000000"))

# ======= Output names =======
SOLUTIONS_DIR = os.getenv("PZ_SOLUTIONS_DIR", "solutions")
LAYOUT_HTML   = os.getenv("PZ_LAYOUT_HTML", "layout_view.html")
LOG_FILE      = os.getenv("PZ_LOG_FILE", os.path.join("logs", "search.log"))


class CFG:
    BOARD_SIZE = BOARD_SIZE

    PRUNE          = PRUNE
    PROGRESS_EVERY = PROGRESS_EVERY
    CURSOR_EVERY   = CURSOR_EVERY

    SOLUTIONS_DIR = SOLUTIONS_DIR
    LAYOUT_HTML   = LAYOUT_HTML
    LOG_FILE      = LOG_FILE

__all__ = ["CFG"]
