"""
Configuration & Defaults
========================
This module serves as the central registry for global constants.

Why is this file needed?
------------------------
1. Defaults: Every factory in the model layer reads its default style values
   from here, so a title block and its JSON fixture never disagree.
2. Drag wiring: The synthetic id prefixes used by palette buttons and column
   drop zones live in one place; the resolver parses what the host produces.
3. Environment: The default log level can be overridden without code changes.

Exports:
    DEFAULT_LOG_LEVEL (int): Level used by the CLI when none is given.
    EXPORT_FILENAME (str): File name of the "download project" JSON.
"""
import logging
import os


def get_log_level(default: int = logging.INFO) -> int:
    """
    Resolve the log level from SLIDEEDITOR_LOG_LEVEL (name or number).
    """
    raw = os.environ.get("SLIDEEDITOR_LOG_LEVEL", "").strip()
    if not raw:
        return default
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelName(raw.upper())
    return level if isinstance(level, int) else default


# --- Text blocks ---
TITLE_CONTENT: str = "<h1>New Title</h1>"
PARAGRAPH_CONTENT: str = "<p>New paragraph</p>"
TITLE_FONT_SIZE: int = 32
PARAGRAPH_FONT_SIZE: int = 16
TEXT_COLOR: str = "#000000"
TEXT_MARGIN_TOP: int = 12
TEXT_MARGIN_BOTTOM: int = 16

# --- Image blocks ---
IMAGE_SRC: str = (
    "https://images.pexels.com/photos/1619317/pexels-photo-1619317.jpeg"
    "?auto=compress&cs=tinysrgb&w=400"
)
IMAGE_WIDTH: int = 300
IMAGE_HEIGHT: int = 200
IMAGE_BORDER_RADIUS: int = 8

# --- Spacer blocks ---
SPACER_HEIGHT: int = 40

# --- Drag & drop ids ---
PALETTE_ID_PREFIX: str = "palette-"
COLUMN_ID_PREFIX: str = "column-"

# --- Export ---
EXPORT_FILENAME: str = "announcement-slides.json"

DEFAULT_LOG_LEVEL: int = get_log_level()
