import importlib.util
import json
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]


def _load_sweep():
    spec = importlib.util.spec_from_file_location("regression_sweep", ROOT / "tools" / "regression_sweep.py")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_regression_sweep_over_shipped_cases(tmp_path):
    main = _load_sweep().main

    report = tmp_path / "report.json"
    rc = main(["--params-dir", str(ROOT / "examples" / "regression_params"), "--report", str(report)])

    assert rc == 0
    data = json.loads(report.read_text(encoding="utf-8"))
    assert set(data) == {"finger_closed", "finger_open", "flat_closed", "thick_walls", "tiny_fingers_inch"}
    assert "Top Panel" not in data["finger_open"]["panels"]
    assert data["flat_closed"]["panels"]["Front Panel"]["bbox"] == [90.0, 90.0]
    assert "THICK_MATERIAL" in data["thick_walls"]["warnings"]


def test_regression_sweep_reports_failures(tmp_path):
    main = _load_sweep().main

    params = tmp_path / "params"
    params.mkdir()
    (params / "bad.json").write_text(
        json.dumps({"params": {"joint_type": "finger", "finger_size": None}}), encoding="utf-8"
    )
    report = tmp_path / "report.json"

    assert main(["--params-dir", str(params), "--report", str(report)]) == 1
    assert "error" in json.loads(report.read_text(encoding="utf-8"))["bad"]
