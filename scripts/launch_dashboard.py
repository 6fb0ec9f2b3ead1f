#!/usr/bin/env python3
"""Launch the power consumption monitoring dashboard."""

from __future__ import annotations

import argparse
import logging
import sys

from power_monitor.gui.main_window import run_dashboard
from power_monitor.io import SettingsError, load_dashboard_settings


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--config",
        default=None,
        help="Path to the settings YAML file (default: config/settings.yml).",
    )
    parser.add_argument(
        "--demo",
        action="store_true",
        help="Use generated mock data instead of the device backend.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override the logging level from the settings file.",
    )
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    try:
        settings = load_dashboard_settings(args.config)
    except SettingsError as exc:
        print(f"Could not load settings: {exc}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=args.log_level or settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    run_dashboard(settings, demo=args.demo)
    return 0


if __name__ == "__main__":
    sys.exit(main())
