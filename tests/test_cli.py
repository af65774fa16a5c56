"""Tests for the command line entry point."""

import json

import pytest

from buildergen import __version__
from buildergen.cli import EXIT_BAD_INPUT, EXIT_FAILED, EXIT_OK, main
from buildergen.logging import reset_logging


@pytest.fixture(autouse=True)
def restore_logging():
    yield
    reset_logging()


@pytest.fixture
def schema_file(tmp_path, schema_data):
    path = tmp_path / "agents.json"
    path.write_text(json.dumps(schema_data))
    return path


class TestGenerate:
    """The generate command."""

    def test_to_stdout(self, schema_file, capsys):
        assert main(["generate", str(schema_file)]) == EXIT_OK

        out = capsys.readouterr().out
        assert out.startswith(f"# Generated by buildergen from {schema_file}. Do not edit.")
        assert "class AgentBuilder(CompanionBuilder):" in out

    def test_to_file(self, schema_file, tmp_path):
        output = tmp_path / "out" / "agents_gen.py"

        assert main(["generate", str(schema_file), "-o", str(output)]) == EXIT_OK
        assert "class OrgBuilder(CompanionBuilder):" in output.read_text()

    def test_check(self, schema_file, tmp_path, capsys):
        output = tmp_path / "agents_gen.py"

        assert main(["generate", str(schema_file), "-o", str(output), "--check"]) == EXIT_FAILED
        assert "is out of date" in capsys.readouterr().err
        assert not output.exists()

        main(["generate", str(schema_file), "-o", str(output)])
        assert main(["generate", str(schema_file), "-o", str(output), "--check"]) == EXIT_OK

        output.write_text(output.read_text() + "# edited\n")
        assert main(["generate", str(schema_file), "-o", str(output), "--check"]) == EXIT_FAILED

    def test_check_needs_output(self, schema_file, capsys):
        assert main(["generate", str(schema_file), "--check"]) == EXIT_BAD_INPUT
        assert "--check needs --output" in capsys.readouterr().err

    def test_config_file(self, schema_file, tmp_path, capsys):
        config = tmp_path / "buildergen.json"
        config.write_text(json.dumps({"emit_header": False}))

        assert main(["generate", str(schema_file), "--config", str(config)]) == EXIT_OK
        assert capsys.readouterr().out.startswith("from __future__ import annotations")

    def test_diagnostics(self, tmp_path, capsys):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({
            "declarations": [
                {"name": "Shape", "kind": "variant"},
                {"name": "Point", "fields": [{"name": "x", "type": "int"}]},
            ]
        }))

        assert main(["generate", str(path)]) == EXIT_FAILED
        captured = capsys.readouterr()
        assert "class PointBuilder(CompanionBuilder):" in captured.out
        assert f"{path} (declarations[0]): error: builder is only compatible with records" in captured.err

    @pytest.mark.parametrize(
        "content, message",
        [
            ("{", "error: invalid JSON"),
            ("[]", "error: schema must be an object, got an array"),
            ('{"declarations": [{"fields": []}]}', "error: declaration needs a 'name'"),
        ],
    )
    def test_bad_schema(self, tmp_path, capsys, content, message):
        path = tmp_path / "bad.json"
        path.write_text(content)

        assert main(["generate", str(path)]) == EXIT_BAD_INPUT
        assert message in capsys.readouterr().err

    def test_missing_schema(self, tmp_path, capsys):
        assert main(["generate", str(tmp_path / "missing.json")]) == EXIT_BAD_INPUT
        assert "cannot read schema" in capsys.readouterr().err

    def test_bad_config(self, schema_file, tmp_path, capsys):
        config = tmp_path / "buildergen.json"
        config.write_text(json.dumps({"indent_size": 20}))

        assert main(["generate", str(schema_file), "--config", str(config)]) == EXIT_BAD_INPUT
        assert "indent_size must be between 1 and 8" in capsys.readouterr().err


class TestOptions:
    """Global options."""

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main(["--version"])
        assert excinfo.value.code == 0
        assert __version__ in capsys.readouterr().out

    def test_command_required(self):
        with pytest.raises(SystemExit) as excinfo:
            main([])
        assert excinfo.value.code == 2

    def test_log_file(self, schema_file, tmp_path):
        log_file = tmp_path / "buildergen.log"

        main(["--log-level", "INFO", "--log-file", str(log_file), "generate", str(schema_file)])

        assert "Generated 3 of 3 declarations" in log_file.read_text()

    def test_unknown_log_level(self, schema_file, capsys):
        assert main(["--log-level", "LOUD", "generate", str(schema_file)]) == EXIT_BAD_INPUT
        assert "unknown log level 'LOUD'" in capsys.readouterr().err
