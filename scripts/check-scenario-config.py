#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Stuart Alldred.

"""Check a scenario config without generating anything.

Runs the same schema and generation-parameter checks vmgen runs at startup and
prints the resolved scenarios. Exit status 1 if the config would be refused.
Requires vmgen to be installed (pip install -e .).
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from vmgen.core.scenario_config import get_default_config_path, load_scenario_config


def main() -> int:
    parser = argparse.ArgumentParser(description="Check a vmgen scenario config")
    parser.add_argument(
        "config",
        type=Path,
        nargs="?",
        default=get_default_config_path(),
        help="Scenario YAML. Default: built-in config.",
    )
    args = parser.parse_args()

    try:
        scenarios = load_scenario_config(args.config)
    except (OSError, ValueError) as e:
        print(f"Invalid config: {e}", file=sys.stderr)
        return 1

    print(f"OK: {args.config} ({len(scenarios)} scenarios)")
    width = max(len(s.name) for s in scenarios)
    for s in scenarios:
        weights = "-".join(str(w) for w in s.weights)
        print(f"  {s.name:<{width}}  {s.file}  weights={weights} seed={s.seed} size={s.size}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
