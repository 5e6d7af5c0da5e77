# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Stuart Alldred.

"""CLI entry point for vmgen."""

import sys
from pathlib import Path

from vmgen.core.generator import GenerationError
from vmgen.core.serializer import read_program
from vmgen.core.vmgen import VmGen


def main() -> None:
    import argparse

    parser = argparse.ArgumentParser(description="vmgen - VM exercise scenario generator")
    parser.add_argument("--output-dir", "-o", type=Path, default=Path("scenarios"))
    parser.add_argument(
        "--verbosity",
        "-v",
        default="info",
        choices=["debug", "info", "warning", "error"],
    )
    parser.add_argument(
        "--scenario-config",
        type=Path,
        default=None,
        metavar="FILE",
        help="Scenario YAML (name, file, weights, seed, size). Default: built-in config.",
    )
    parser.add_argument(
        "--debug-yaml",
        type=Path,
        default=None,
        metavar="FILE",
        help="Optional: write per-scenario generation summary YAML to FILE",
    )
    parser.add_argument(
        "--fail-fast",
        action="store_true",
        help="Stop at the first scenario that cannot be written.",
    )
    parser.add_argument(
        "--list",
        type=Path,
        default=None,
        metavar="FILE",
        help="Print a listing of an existing program file instead of generating.",
    )
    args = parser.parse_args()

    if args.list is not None:
        try:
            program = read_program(args.list)
        except (OSError, ValueError) as e:
            print(f"vmgen: error: {e}", file=sys.stderr)
            sys.exit(1)
        sys.stdout.write(program.listing())
        return

    try:
        vmgen = VmGen(
            output_dir=args.output_dir,
            scenario_config=args.scenario_config,
            verbosity=args.verbosity,
            fail_fast=args.fail_fast,
        )
    except ValueError as e:
        print(f"vmgen: error: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        failed = vmgen.run()
    except MemoryError:
        vmgen.error("Error while allocating memory")
        sys.exit(1)
    except OSError:
        sys.exit(1)
    except (GenerationError, ValueError) as e:
        vmgen.error(str(e))
        sys.exit(1)

    if args.debug_yaml is not None:
        vmgen.write_debug_yaml(args.debug_yaml)
        vmgen.info(f"Wrote debug YAML to {args.debug_yaml}")
    if failed:
        vmgen.warning(f"{len(failed)} scenario(s) not written: {', '.join(failed)}")


if __name__ == "__main__":
    main()
