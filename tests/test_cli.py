"""Tests for the command-line interface."""
import json

import pytest
import yaml
from click.testing import CliRunner

from rcdesign.cli import main


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def template_file(runner, tmp_path):
    result = runner.invoke(main, ["template"])
    path = tmp_path / "elements.yaml"
    path.write_text(result.output, encoding="utf-8")
    return path


class TestTemplate:

    def test_prints_parseable_yaml(self, runner):
        result = runner.invoke(main, ["template"])
        assert result.exit_code == 0
        data = yaml.safe_load(result.output)
        assert [e["id"] for e in data["elements"]] == ["B1", "C1", "S1"]


class TestValidate:

    def test_template_is_valid(self, runner, template_file):
        result = runner.invoke(main, ["validate", str(template_file)])
        assert result.exit_code == 0
        assert "Input file is valid (3 element(s))." in result.output

    def test_reports_issues(self, runner, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text(yaml.safe_dump({"elements": [{
            "id": "B9",
            "element_kind": "beam",
            "geometry": {"width": -300, "height": 500},
            "material": {"fc": 30, "fy": 400},
        }]}), encoding="utf-8")
        result = runner.invoke(main, ["validate", str(path)])
        assert result.exit_code == 1
        assert "B9: geometry.width" in result.output

    def test_yaml_syntax_error(self, runner, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("elements: [\n", encoding="utf-8")
        result = runner.invoke(main, ["validate", str(path)])
        assert result.exit_code == 1


class TestRun:

    def test_writes_results(self, runner, template_file, tmp_path):
        output = tmp_path / "results.json"
        result = runner.invoke(main, ["run", str(template_file), "-o", str(output)])
        assert result.exit_code == 0, result.output
        assert "MEMBER DESIGN SUMMARY" in result.output

        records = json.loads(output.read_text(encoding="utf-8"))
        assert [r["id"] for r in records] == ["B1", "C1", "S1"]
        assert all("result" in r for r in records)
        assert records[2]["result"]["reinforcement"]["main"]["spacing"] == 425

    def test_input_errors_recorded(self, runner, tmp_path):
        path = tmp_path / "mixed.yaml"
        path.write_text(yaml.safe_dump({"elements": [
            {
                "id": "S2",
                "element_kind": "slab",
                "geometry": {"width": 1000, "height": 0},
                "material": {"fc": 25, "fy": 400},
            },
        ]}), encoding="utf-8")
        output = tmp_path / "results.json"
        result = runner.invoke(main, ["run", str(path), "-o", str(output), "--workers", "1"])
        assert result.exit_code == 0

        (record,) = json.loads(output.read_text(encoding="utf-8"))
        assert record["error"]["field"] == "geometry.height"

    def test_missing_file(self, runner, tmp_path):
        result = runner.invoke(main, ["run", str(tmp_path / "nope.yaml")])
        assert result.exit_code != 0

    def test_zero_demand_ratio_kept(self, runner, tmp_path):
        path = tmp_path / "unloaded.yaml"
        path.write_text(yaml.safe_dump({"elements": [{
            "id": "B0",
            "element_kind": "beam",
            "geometry": {"width": 300, "height": 500, "clear_cover": 40},
            "material": {"fc": 30, "fy": 400},
            "forces": {"moment_x": 180, "shear_x": 0},
        }]}), encoding="utf-8")
        output = tmp_path / "results.json"
        result = runner.invoke(main, ["run", str(path), "-o", str(output)])
        assert result.exit_code == 0, result.output

        (record,) = json.loads(output.read_text(encoding="utf-8"))
        shear = record["result"]["checks"]["shear_strength"]
        assert shear["ratio"] == "inf"
        assert float(shear["ratio"]) == float("inf")
        assert record["result"]["checks"]["flexural_strength"]["ratio"] is not None
