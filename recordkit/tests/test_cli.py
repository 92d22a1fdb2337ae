"""
Tests for the recordkit CLI.
"""

import json
import logging

import pytest
from typer.testing import CliRunner

from recordkit.cli.main import app

runner = CliRunner()

SCRIPT = {
    "kinds": [
        {"name": "User", "attributes": {"id": "number", "name": "string"}},
        {
            "name": "ProfileImage",
            "attributes": {"id": "number", "userId": "number", "name": "string"},
            "relations": [{"association": "User", "foreign_key": "userId", "target": "User"}],
        },
    ],
    "steps": [
        {"op": "create", "ref": "user", "kind": "User", "data": {"name": "Ada"}},
        {"op": "create", "ref": "profile", "kind": "ProfileImage", "data": {"name": "pic"}, "links": {"User": "user"}},
        {"op": "create_called", "ref": "profile"},
        {"op": "merge", "ref": "user", "data": {"id": 973}},
    ],
}


@pytest.fixture(autouse=True)
def restore_root():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


def write_script(tmp_path, script):
    path = tmp_path / "script.json"
    path.write_text(json.dumps(script))
    return str(path)


def test_simulate_json_reports_cascade(tmp_path):
    result = runner.invoke(app, ["simulate", write_script(tmp_path, SCRIPT), "--json"])

    assert result.exit_code == 0, result.output
    out = json.loads(result.stdout)
    records = {row["ref"]: row for row in out["records"]}

    assert records["user"]["id"] == 973
    assert records["user"]["new"] is False
    assert records["profile"]["can_be_created"] is True
    assert records["profile"]["create_needs_to_be_called"] is False
    assert records["profile"]["plain"]["userId"] == 973
    assert "User" not in records["profile"]["plain"]

    fired = [(e["event"], e["ref"]) for e in out["events"]]
    assert fired == [
        ("can-be-created", "user"),
        ("id-set", "user"),
        ("can-be-created", "profile"),
    ]


def test_simulate_table_output(tmp_path):
    result = runner.invoke(app, ["simulate", write_script(tmp_path, SCRIPT)])

    assert result.exit_code == 0, result.output
    assert "Records" in result.output
    assert "Fired Events" in result.output


def test_simulate_missing_file(tmp_path):
    result = runner.invoke(app, ["simulate", str(tmp_path / "nope.json"), "--json"])

    assert result.exit_code == 1
    assert json.loads(result.stdout)["error"] == "Script file not found"


def test_simulate_invalid_step(tmp_path):
    script = {"kinds": [], "steps": [{"op": "delete", "ref": "x"}]}
    result = runner.invoke(app, ["simulate", write_script(tmp_path, script), "--json"])

    assert result.exit_code == 1
    assert json.loads(result.stdout)["error"].startswith("Invalid script")


def test_simulate_id_conflict(tmp_path):
    script = {
        "kinds": [{"name": "User"}],
        "steps": [
            {"op": "create", "ref": "u", "kind": "User", "data": {"id": 1}},
            {"op": "merge", "ref": "u", "data": {"id": 2}},
        ],
    }
    result = runner.invoke(app, ["simulate", write_script(tmp_path, script), "--json"])

    assert result.exit_code == 1
    assert "cannot change" in json.loads(result.stdout)["error"]


def test_simulate_unknown_kind(tmp_path):
    script = {"steps": [{"op": "create", "ref": "u", "kind": "Ghost"}]}
    result = runner.invoke(app, ["simulate", write_script(tmp_path, script), "--json"])

    assert result.exit_code == 1
    assert "Unknown kind" in json.loads(result.stdout)["error"]


def test_version():
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert "recordkit" in result.output
