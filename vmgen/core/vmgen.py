# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Stuart Alldred.

"""vmgen driver: generate and write every configured scenario."""

from __future__ import annotations

import logging
import sys
import time
from pathlib import Path

from vmgen.core.generator import SequenceGenerator
from vmgen.core.scenario_config import Scenario, get_default_config_path, load_scenario_config
from vmgen.core.serializer import write_program
from vmgen.program import Program


class VmGen:
    """Scenario fixture generator main class."""

    def __init__(
        self,
        output_dir: Path | None = None,
        scenario_config: Path | None = None,
        verbosity: str = "info",
        fail_fast: bool = False,
        scenarios: list[Scenario] | None = None,
    ) -> None:
        self.output_dir = output_dir or Path("scenarios")
        self.fail_fast = fail_fast

        self.log = logging.getLogger("vmgen")
        if not self.log.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setLevel(logging.DEBUG)
            handler.setFormatter(
                logging.Formatter("%(asctime)s - %(name)-20s - %(levelname)s - %(message)s")
            )
            self.log.addHandler(handler)
        self.log.setLevel(getattr(logging, verbosity.upper()))
        self.debug = self.log.debug
        self.info = self.log.info
        self.warning = self.log.warning
        self.error = self.log.error

        if scenarios is None:
            config_path = (
                scenario_config if scenario_config is not None else get_default_config_path()
            )
            scenarios = load_scenario_config(config_path)
            self.debug(f"Loaded {len(scenarios)} scenarios from {config_path}")
        self.scenarios = scenarios
        # scenario name -> summary, filled in by run()
        self.results: dict[str, dict] = {}

    def generate_scenario(self, scenario: Scenario) -> Program:
        gen = SequenceGenerator(
            scenario.weights,
            scenario.seed,
            scenario.size,
            log=self.log.getChild("generator"),
        )
        start = time.time()
        program = gen.generate()
        end = time.time()
        self.info(
            f"Generated {scenario.name}: size={scenario.size} rA={program.r_a} "
            f"rL={program.r_l} in {(end - start):.2f} seconds"
        )
        if gen.back7_rejections or gen.lookback_corrections:
            self.debug(
                f"{scenario.name}: {gen.back7_rejections} early BACK7 rejections, "
                f"{gen.lookback_corrections} SETL lookback corrections"
            )
        self.results[scenario.name] = {
            "file": scenario.file,
            "seed": scenario.seed,
            "weights": list(scenario.weights),
            "size": scenario.size,
            "r_a": program.r_a,
            "r_l": program.r_l,
            "histogram": program.histogram(),
            "back7_rejections": gen.back7_rejections,
            "lookback_corrections": gen.lookback_corrections,
            "written": False,
        }
        return program

    def run(self) -> list[str]:
        """Generate and write all scenarios. Returns names of scenarios that failed to write.

        Write failures are logged and the run continues, unless fail_fast is set.
        """
        self.output_dir.mkdir(parents=True, exist_ok=True)
        failed: list[str] = []
        for scenario in self.scenarios:
            program = self.generate_scenario(scenario)
            path = self.output_dir / scenario.file
            try:
                written = write_program(program, path)
            except OSError as e:
                self.error(f"Error while writing {scenario.name} to {path}: {e}")
                failed.append(scenario.name)
                if self.fail_fast:
                    raise
                continue
            self.results[scenario.name]["written"] = True
            self.info(f"Wrote {path} ({written} bytes)")
        return failed

    def write_debug_yaml(self, path: Path) -> None:
        """Write per-scenario generation summary as YAML."""
        import yaml

        out = {
            "output_dir": str(self.output_dir),
            "scenarios": self.results,
        }
        with open(path, "w") as f:
            yaml.dump(out, f, default_flow_style=False, sort_keys=False)
