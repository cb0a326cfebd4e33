"""
Main entry point for the agent graph viewer.

Usage:
    python -m agentgraph_app [--group-id ID] [--api-url URL] [--demo]
    agentgraph  (if installed)
"""

import argparse
import logging
import sys
import traceback
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from agentgraph_app.config import AppConfig

logger = logging.getLogger("agentgraph_app")

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def setup_exception_hook(log_file: Path):
    """Setup global exception hook to catch Qt exceptions."""

    def exception_hook(exctype, value, tb):
        # Write to log file
        error_msg = ''.join(traceback.format_exception(exctype, value, tb))
        with open(log_file, "a", encoding="utf-8") as f:
            f.write(f"\n{'='*60}\n")
            f.write(f"UNHANDLED EXCEPTION at {datetime.now()}\n")
            f.write(f"{'='*60}\n")
            f.write(error_msg)
            f.write("\n")

        logger.critical("Unhandled exception (log saved to %s)\n%s", log_file, error_msg)

        # Call default handler
        sys.__excepthook__(exctype, value, tb)

    sys.excepthook = exception_hook


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="agentgraph",
        description="Interactive force-directed view of an agent group's executions.",
    )
    parser.add_argument("--api-url", help="API root (default: $AGENTGRAPH_API_URL or localhost)")
    parser.add_argument("--group-id", help="Agent group to display")
    parser.add_argument("--timeout", type=float, help="HTTP timeout in seconds")
    parser.add_argument("--demo", action="store_true", help="Use generated data instead of the API")
    parser.add_argument("--demo-pages", type=int, help="Number of generated pages in demo mode")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> AppConfig:
    """Environment first, then command-line overrides."""
    config = AppConfig.from_env()

    if args.api_url:
        config.api_url = args.api_url
    if args.group_id:
        config.group_id = args.group_id
    if args.timeout is not None:
        config.timeout = args.timeout
    if args.demo:
        config.demo = True
    if args.demo_pages is not None:
        config.demo_pages = max(1, args.demo_pages)

    return config


def main(argv: Optional[List[str]] = None):
    """Launch the agent graph viewer."""
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level, format=LOG_FORMAT)

    # Setup exception hook first
    setup_exception_hook(Path.cwd() / "crash_log.txt")

    config = build_config(args)

    from PyQt6.QtWidgets import QApplication
    from PyQt6.QtCore import Qt

    # High DPI support
    QApplication.setHighDpiScaleFactorRoundingPolicy(
        Qt.HighDpiScaleFactorRoundingPolicy.PassThrough
    )

    app = QApplication(sys.argv[:1])
    app.setStyle("Fusion")
    app.setApplicationName("AgentGraph")

    # Import and apply light theme
    from agentgraph_app.resources.styles import LIGHT_STYLESHEET
    app.setStyleSheet(LIGHT_STYLESHEET)

    # Import and create main window
    from agentgraph_app.views.main_window import MainWindow

    logger.info("Showing group %s from %s", config.group_id, "demo data" if config.demo else config.api_url)
    window = MainWindow(config)
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
