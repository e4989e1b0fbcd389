"""
Application Initialization
==========================
Composition root for running the editor core outside a GUI host.

Why is this file needed?
------------------------
It acts as the "Dependency Injection" root. It:
1. Sets up logging for the 'slideeditor' namespace.
2. Instantiates the EditorStore (the command/query surface a view binds to).
3. Seeds the requested number of slides and either prints the project JSON
   or exports it like the builder's "Download JSON" button.
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from slideeditor import config
from slideeditor.app.state import EditorStore
from slideeditor.logging_config import setup_logging
from slideeditor.model.io import ProjectIO
from slideeditor.model.schema import LayoutType


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="slideeditor",
        description="Create an announcement slide project and dump it as JSON.",
    )
    parser.add_argument("--slides", type=int, default=1, help="number of slides to create (default: 1)")
    parser.add_argument(
        "--layout",
        choices=[layout.value for layout in LayoutType],
        default=LayoutType.ONE_COLUMN.value,
        help="layout of each slide's first row",
    )
    parser.add_argument("--export", metavar="PATH", help=f"write the JSON to PATH (a directory gets '{config.EXPORT_FILENAME}')")
    parser.add_argument("--log-file", metavar="PATH", help="also write logs to PATH")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    # 1. Setup Logging (Console + Optional File)
    level = logging.DEBUG if args.verbose else config.DEFAULT_LOG_LEVEL
    setup_logging(level=level, log_file=args.log_file)
    logger = logging.getLogger("slideeditor.main")

    # 2. Initialize the store with a first slide in the requested layout
    layout = LayoutType(args.layout)
    store = EditorStore()
    store.update_row_layout(0, 0, layout)
    for _ in range(max(args.slides, 1) - 1):
        store.add_slide(layout)
    store.set_current_slide(0)
    logger.info(f"Created project with {len(store.project.slides)} slide(s).")

    # 3. Output
    if args.export:
        ProjectIO.export_project(store.project, args.export)
    else:
        sys.stdout.write(ProjectIO.to_json(store.project) + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
