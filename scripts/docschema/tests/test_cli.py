"""Tests for the docschema command-line interface."""

import json

import pytest

from scripts.docschema.cli import ExitCode, main


def _error_json(err):
    """Parse the JSON error line; log lines may precede it."""
    lines = [line for line in err.splitlines() if line.strip()]
    return json.loads(lines[-1])


class TestGenerateCommand:
    """Tests for `docschema generate`."""

    def test_prints_schema(self, sample_ts_project, capsys):
        code = main(["generate", str(sample_ts_project / "src" / "button.tsx")])
        assert code == ExitCode.SUCCESS

        output = json.loads(capsys.readouterr().out)
        assert list(output) == ["Button", "Size"]

    def test_strict_order(self, sample_ts_project, capsys):
        code = main(["generate", str(sample_ts_project / "src" / "button.tsx"), "--strict-order"])
        assert code == ExitCode.SUCCESS

        output = json.loads(capsys.readouterr().out)
        assert [entry["title"] for entry in output] == ["Button", "Size"]

    def test_output_file(self, sample_ts_project, capsys):
        output_path = sample_ts_project / "out" / "button.json"
        code = main([
            "generate",
            str(sample_ts_project / "src" / "button.tsx"),
            "--output",
            str(output_path),
        ])
        assert code == ExitCode.SUCCESS
        schema = json.loads(output_path.read_text(encoding="utf-8"))
        assert schema["Button"]["tags"][1] == {"name": "zh", "value": "按钮"}

    def test_not_found(self, tmp_path, capsys):
        code = main(["generate", str(tmp_path / "missing.ts")])
        assert code == ExitCode.NOT_FOUND

        error = _error_json(capsys.readouterr().err)
        assert error["error"] == "entry_not_found"

    def test_config_error(self, sample_ts_project, capsys):
        config_file = sample_ts_project / "bad.yaml"
        config_file.write_text("property_sort: random\n")
        code = main([
            "generate",
            str(sample_ts_project / "src" / "button.tsx"),
            "--config",
            str(config_file),
        ])
        assert code == ExitCode.CONFIG_ERROR

        error = _error_json(capsys.readouterr().err)
        assert error["error"] == "config_invalid"
        assert error["file"] == str(config_file)

    def test_missing_config_file(self, sample_ts_project, capsys):
        code = main([
            "generate",
            str(sample_ts_project / "src" / "button.tsx"),
            "--config",
            str(sample_ts_project / "none.yaml"),
        ])
        assert code == ExitCode.CONFIG_ERROR
        assert _error_json(capsys.readouterr().err)["error"] == "config_not_found"

    def test_config_file_applied(self, sample_ts_project, capsys):
        config_file = sample_ts_project / "docschema.yaml"
        config_file.write_text("strict_declaration_order: true\nproperty_sort: name\n")
        code = main([
            "generate",
            str(sample_ts_project / "src" / "button.tsx"),
            "--config",
            str(config_file),
        ])
        assert code == ExitCode.SUCCESS

        output = json.loads(capsys.readouterr().out)
        names = [p["name"] for p in output[0]["schema"]["data"]]
        assert names == sorted(names)

    def test_requires_command(self):
        with pytest.raises(SystemExit):
            main([])
