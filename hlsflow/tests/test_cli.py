"""
Tests for the hlsflow command line.
"""

import json
import subprocess

import pytest

from hlsflow.cli import SCHEMA_FILE, main, project_file_schema
from hlsflow.parser import YamlProjectParser


@pytest.fixture(autouse=True)
def toolchain_env(monkeypatch, tmp_path):
    monkeypatch.setenv("HLSFLOW_RESOURCE_DIR", str(tmp_path / "resource"))
    monkeypatch.setenv("HLSFLOW_BINARIES_DIR", str(tmp_path / "binaries"))
    monkeypatch.setenv("HLSFLOW_TARGET_TRIPLE", "x86_64-unknown-linux-gnu")


def _json(capsys):
    return json.loads(capsys.readouterr().out.strip().splitlines()[-1])


def test_stages_json(capsys):
    main(["stages", "--json"])
    data = _json(capsys)
    assert data["success"]
    assert [s["id"] for s in data["stages"]][0] == "bambu.hls"
    assert data["stages"][-1]["target"] == "<project>_bambu_bit.bit"


def test_stages_text(capsys):
    main(["stages"])
    out = capsys.readouterr().out
    assert "bambu.place" in out
    assert "<project>_bambu_place.xml" in out


def test_command_json(project_dir, tmp_path, capsys):
    main(["command", str(project_dir / "adder.yml"), "bambu.map", "--json"])
    data = _json(capsys)

    assert data["success"]
    assert data["executable"].endswith("fde-cli/map")
    assert data["arguments"][:3] == ["-y", "-i", "adder_bambu_syn.edf"]
    assert data["workingDirectory"] == str(project_dir.resolve())


def test_command_error_json(project_dir, capsys):
    with pytest.raises(SystemExit) as exc_info:
        main(["command", str(project_dir / "adder.yml"), "bambu.sim", "--json"])
    assert exc_info.value.code == 1
    data = _json(capsys)
    assert data["success"] is False
    assert "bambu.sim" in data["error"]


def test_command_error_text(tmp_path, capsys):
    with pytest.raises(SystemExit):
        main(["command", str(tmp_path / "missing.yml"), "bambu.hls"])
    assert "Error: " in capsys.readouterr().out


def test_run_missing_binary(project_dir, capsys):
    with pytest.raises(SystemExit) as exc_info:
        main(["run", str(project_dir / "adder.yml"), "bambu.hls", "--json", "--progress"])
    assert exc_info.value.code == 1

    lines = capsys.readouterr().out.strip().splitlines()
    assert lines[0] == "PROGRESS: Loading project..."
    assert json.loads(lines[-1])["success"] is False


def test_run_timeout_reported(project_dir, capsys, monkeypatch):
    def slow_run(argv, **kwargs):
        raise subprocess.TimeoutExpired(argv, kwargs["timeout"])

    monkeypatch.setattr(subprocess, "run", slow_run)
    with pytest.raises(SystemExit) as exc_info:
        main(["run", str(project_dir / "adder.yml"), "bambu.hls", "--timeout", "1", "--json"])
    assert exc_info.value.code == 1

    data = _json(capsys)
    assert data["success"] is False
    assert data["error"].startswith("bambu.hls | Timed out after 1 s")


def test_constraints(project_dir, capsys):
    main(["constraints", str(project_dir / "adder.yml"), "--json"])
    data = _json(capsys)
    assert data["output"].endswith("adder_bambu_cons.xml")
    assert (project_dir / "adder_bambu_cons.xml").exists()


def test_constraints_unknown_device(project_dir, capsys):
    with pytest.raises(SystemExit):
        main(["constraints", str(project_dir / "adder.yml"), "--device", "XC7", "--json"])
    assert "XC7" in _json(capsys)["error"]


def test_ports(project_dir, capsys):
    main(["ports", str(project_dir / "add.v"), "add", "--json"])
    data = _json(capsys)
    assert data["module"] == "_Z3addhh"
    assert data["ports"][3] == {"name": "a", "direction": "input", "msb": 7, "lsb": 0}


def test_ports_text(project_dir, capsys):
    main(["ports", str(project_dir / "add.v"), "add"])
    out = capsys.readouterr().out
    assert "_Z3addhh (7 ports)" in out
    assert "[7:0]" in out


def test_ports_no_match(project_dir, capsys):
    with pytest.raises(SystemExit):
        main(["ports", str(project_dir / "add.v"), "multiply"])
    assert "multiply" in capsys.readouterr().out


def test_set_updates_project_file(project_dir, capsys):
    main(["set", str(project_dir / "adder.yml"), "hls", "clockPeriod", "12"])
    assert "hls.clockPeriod = 12" in capsys.readouterr().out

    project = YamlProjectParser().parse_file(project_dir / "adder.yml")
    assert project.settings.hls.clock_period == 12
    assert project.settings.hls.top_function == "add"


def test_set_rejects_invalid_value(project_dir, capsys):
    original = (project_dir / "adder.yml").read_text()
    with pytest.raises(SystemExit):
        main(["set", str(project_dir / "adder.yml"), "route", "mode", "Maze", "--json"])
    assert _json(capsys)["success"] is False
    assert (project_dir / "adder.yml").read_text() == original


def test_devices(capsys):
    main(["devices", "--json"])
    data = _json(capsys)
    assert data["devices"][0]["device"] == "FDP3P7"


def test_schema(tmp_path, capsys):
    main(["schema", str(tmp_path / "schemas")])
    schema = json.loads((tmp_path / "schemas" / SCHEMA_FILE).read_text())

    assert schema["required"] == ["name"]
    assert "settings" in schema["properties"]
    assert schema == project_file_schema()
