#!/usr/bin/env python3

import argparse
import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Tuple

from shapely.geometry import Polygon

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from fingerboxgen import box_spec_from_params, build_box, check_outline, generate_svg


@dataclass
class Case:
    name: str
    params: Dict[str, Any]
    source_file: Path


def _read_case(path: Path) -> Case:
    data = json.loads(path.read_text(encoding="utf-8"))
    name = str(data.get("name") or path.stem).strip()
    params = data.get("params")
    if not isinstance(params, dict):
        raise TypeError(f"{path}: params must be an object/dict")
    return Case(name=name, params=params, source_file=path)


def _iter_cases(params_dir: Path) -> List[Case]:
    if not params_dir.exists():
        raise FileNotFoundError(f"Params dir not found: {params_dir}")

    cases: List[Case] = []
    for p in sorted(params_dir.glob("*.json")):
        cases.append(_read_case(p))

    if not cases:
        raise FileNotFoundError(f"No *.json found in: {params_dir}")

    return cases


def _find_error_warnings(warnings: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    out: List[Dict[str, Any]] = []
    for w in warnings or []:
        sev = str((w or {}).get("severity", "")).lower()
        if sev == "error":
            out.append(w)
    return out


def _check_case(case: Case) -> Dict[str, Any]:
    spec = box_spec_from_params(case.params)
    box = build_box(spec)

    panels: Dict[str, Any] = {}
    for panel in box.panels:
        check_outline(panel)
        poly = Polygon(panel.outline)
        if not poly.is_valid:
            raise ValueError(f"{case.name}: self-intersecting outline in {panel.name}")
        w, h = panel.bbox()
        panels[panel.name] = {
            "points": len(panel.outline),
            "area": round(poly.area * box.scale * box.scale, 4),
            "bbox": [round(w * box.scale, 4), round(h * box.scale, 4)],
        }

    res = generate_svg(case.params)
    if "<svg" not in res["svg"][:5000]:
        raise ValueError(f"{case.name}: svg does not look like SVG")
    errors = _find_error_warnings(res["warnings"])
    if errors:
        raise ValueError(f"Blocking errors returned: {errors}")

    return {"panels": panels, "warnings": [w["code"] for w in res["warnings"]]}


def main(argv: List[str]) -> int:
    ap = argparse.ArgumentParser(description="Build every box in a params directory and check its panel outlines.")
    ap.add_argument(
        "--params-dir",
        default="examples/regression_params",
        help="Directory containing *.json files with {name, params} (default: %(default)s)",
    )
    ap.add_argument(
        "--report",
        default="artifacts/regression_report.json",
        help="JSON report path (default: %(default)s)",
    )
    args = ap.parse_args(argv)

    cases = _iter_cases(Path(args.params_dir))

    report: Dict[str, Any] = {}
    failures: List[Tuple[str, str]] = []
    for c in cases:
        try:
            report[c.name] = _check_case(c)
            print(f"OK  {c.name}")
        except (ValueError, TypeError, RuntimeError) as e:
            failures.append((c.name, str(e)))
            report[c.name] = {"error": str(e)}
            print(f"FAIL {c.name}: {e}", file=sys.stderr)

    out = Path(args.report)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(json.dumps(report, indent=2, sort_keys=True), encoding="utf-8")

    if failures:
        print("\nFailures:", file=sys.stderr)
        for name, msg in failures:
            print(f"- {name}: {msg}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
