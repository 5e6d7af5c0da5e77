# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Stuart Alldred.

"""Load scenario definitions from YAML config."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from vmgen.core.generator import check_generation_params


@dataclass(frozen=True)
class Scenario:
    """One fixture: where to write it and how to generate it."""

    name: str
    file: str
    weights: tuple[int, ...]
    seed: int
    size: int


def get_schema_path() -> Path:
    """Path to the scenario config JSON Schema."""
    return Path(__file__).resolve().parent.parent / "config" / "scenario_config_schema.json"


def get_default_config_path() -> Path:
    """Path to the default scenario config shipped with vmgen."""
    return Path(__file__).resolve().parent.parent / "config" / "scenarios_default.yaml"


def validate_scenario_config(raw: dict[str, Any], path: Path | None = None) -> None:
    """Check parsed YAML against the scenario schema, reporting every violation at once."""
    import jsonschema

    schema = json.loads(get_schema_path().read_text())
    validator = jsonschema.Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(raw), key=lambda e: [str(p) for p in e.absolute_path])
    if not errors:
        return
    loc = f" ({path})" if path else ""
    details = "; ".join(
        f"{'/'.join(str(p) for p in e.absolute_path) or '<root>'}: {e.message}" for e in errors
    )
    raise ValueError(f"Scenario config schema validation failed{loc}: {details}")


def _int_field(value: int | str) -> int:
    # Schema allows ints or decimal/hex strings.
    return value if isinstance(value, int) else int(value, 0)


def parse_scenarios(raw: dict[str, Any], path: Path | None = None) -> list[Scenario]:
    """Turn schema-valid config into Scenarios. Output file names must be unique."""
    loc = f" ({path})" if path else ""
    out: list[Scenario] = []
    seen: set[str] = set()
    for s in raw["scenarios"]:
        name = s["name"]
        file = s.get("file", f"{name}.bin")
        if file in seen:
            raise ValueError(f"Duplicate scenario output file{loc}: {file}")
        seen.add(file)
        seed = _int_field(s["seed"])
        size = _int_field(s["size"])
        # Reject anything generation would refuse before a single file is written.
        try:
            weights = check_generation_params(s["weights"], seed, size)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Scenario {name}{loc}: {e}") from e
        out.append(Scenario(name=name, file=file, weights=weights, seed=seed, size=size))
    return out


def load_scenario_config(path: Path) -> list[Scenario]:
    """Load and validate scenario config from YAML."""
    import yaml

    raw = yaml.safe_load(path.read_text())
    if not raw:
        raise ValueError(f"Scenario config is empty: {path}")
    validate_scenario_config(raw, path)
    return parse_scenarios(raw, path)
