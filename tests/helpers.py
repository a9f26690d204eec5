import copy
import json
from pathlib import Path

from dripcalc.schema import Assumptions


def write_assumptions(tmp_path: Path, data: dict, filename: str = "assumptions.json") -> Path:
    path = tmp_path / filename
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def clone_assumptions(data: dict) -> dict:
    return copy.deepcopy(data)


def build_assumptions(data: dict, **overrides) -> Assumptions:
    raw = clone_assumptions(data)
    raw.update(overrides)
    return Assumptions.from_dict(raw)
