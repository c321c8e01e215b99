import json
from pathlib import Path

from wasteroute import __main__ as cli


def _snapshot(path: Path) -> Path:
    payload = {
        "materials": [
            {"id": "M1", "name": "Paper", "valuePerKg": "0.5"},
            {"id": "M2", "name": "Glass", "valuePerKg": "0.2"},
        ],
        "requests": [
            {"id": "R1", "latitude": -19.9167, "longitude": -43.9345, "weight": "15.5", "materialId": "M1"},
            {"id": "R2", "latitude": -19.9208, "longitude": -43.9376, "weight": "22.3", "materialId": "M2"},
            {"id": "R3", "latitude": -19.8519, "longitude": -43.9695, "weight": "18.7", "materialId": "M1"},
            {"id": "R4", "latitude": -19.9667, "longitude": -44.0167, "weight": "12.9", "materialId": "M2"},
        ],
        "agents": [{"id": "A1", "name": "Ana"}, {"id": "A2", "name": "Bruno"}],
    }
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_run_prints_summary_and_writes_outputs(tmp_path: Path, monkeypatch, capsys) -> None:
    monkeypatch.setattr(cli, "configure_logging", lambda level=None: None)
    snapshot = _snapshot(tmp_path / "snapshot.json")

    exit_code = cli.main(["--snapshot", str(snapshot), "--data-root", str(tmp_path / "data"), "--seed", "7", "run"])

    assert exit_code == 0
    summary = json.loads(capsys.readouterr().out)
    assert summary["routesCreated"] == 2
    assert summary["requestsProcessed"] == 4
    assert summary["skipped"] is False
    assert {"routeId", "agent", "totalDistanceKm", "estimatedDurationMinutes", "totalWeight"} <= set(
        summary["perRoute"][0]
    )
    assert list((tmp_path / "data" / "outputs").glob("routes_*/routes.json"))


def test_run_by_material_reports_material_count(tmp_path: Path, monkeypatch, capsys) -> None:
    monkeypatch.setattr(cli, "configure_logging", lambda level=None: None)
    snapshot = _snapshot(tmp_path / "snapshot.json")

    exit_code = cli.main(
        ["--snapshot", str(snapshot), "--data-root", str(tmp_path / "data"), "--seed", "7", "run", "--by-material"]
    )

    assert exit_code == 0
    summary = json.loads(capsys.readouterr().out)
    assert summary["materialsGrouped"] == 2
    assert summary["requestsProcessed"] == 4


def test_missing_snapshot_returns_error_code(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr(cli, "configure_logging", lambda level=None: None)

    assert cli.main(["--snapshot", str(tmp_path / "nope.json"), "--data-root", str(tmp_path), "run"]) == 2


def test_failed_cycle_returns_error_code(tmp_path: Path, monkeypatch, capsys) -> None:
    monkeypatch.setattr(cli, "configure_logging", lambda level=None: None)
    snapshot = _snapshot(tmp_path / "snapshot.json")

    def unavailable(self):
        raise RuntimeError("snapshot store unavailable")

    monkeypatch.setattr(cli.SnapshotRequestSource, "pending_requests", unavailable)

    exit_code = cli.main(["--snapshot", str(snapshot), "--data-root", str(tmp_path / "data"), "run"])

    assert exit_code == 1
    summary = json.loads(capsys.readouterr().out)
    assert summary["error"] == "RuntimeError: snapshot store unavailable"
    assert summary["routesCreated"] == 0
