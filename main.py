"""
Lane Runner - Door-choice arcade runner

Entry point for the application.
"""

import argparse
import sys

from PySide6.QtWidgets import QApplication
from PySide6.QtCore import Qt

from config import init_config, APP_NAME, APP_VERSION, PATHS


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="lane-runner", description="Door-choice arcade runner")
    parser.add_argument("--seed", default=None, help="Seed for a deterministic run")
    parser.add_argument("--lanes", type=int, default=None, help="Number of lanes")
    parser.add_argument("--checkpoints", type=int, default=None, help="Maximum checkpoints")
    parser.add_argument("--log-level", default="INFO", help="Console log level")
    return parser.parse_args(argv)


def main() -> int:
    """Main entry point for Lane Runner."""
    args = parse_args(sys.argv[1:])

    # Initialize configuration, directories and logging
    init_config()
    from services.logger import init_logging
    init_logging(PATHS.log_file, args.log_level)

    from models.schemas import GameConfig
    overrides = {"seed": args.seed}
    if args.lanes is not None:
        overrides["lane_count"] = args.lanes
    if args.checkpoints is not None:
        overrides["max_checkpoints"] = args.checkpoints
    config = GameConfig(**overrides)

    # High DPI scaling
    QApplication.setHighDpiScaleFactorRoundingPolicy(
        Qt.HighDpiScaleFactorRoundingPolicy.PassThrough
    )

    # Create application
    app = QApplication(sys.argv[:1])
    app.setApplicationName(APP_NAME)
    app.setApplicationVersion(APP_VERSION)

    # Create and show main window
    from app import LaneRunnerApp
    runner_app = LaneRunnerApp(config)
    runner_app.show()

    # Run event loop
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
