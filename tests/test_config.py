"""Tests for generator configuration."""

import io
import json
import logging

import pytest

from buildergen import GeneratorConfig, SchemaError
from buildergen.logging import get_logger, reset_logging, resolve_level, setup_logging


class TestGeneratorConfig:
    """Defaults, files and environment overrides."""

    def test_defaults(self):
        config = GeneratorConfig()
        assert config.indent_size == 4
        assert config.indent == "    "
        assert config.runtime_module == "buildergen.runtime"
        assert config.emit_header is True
        assert config.emit_docstrings is True

    def test_from_dict(self):
        config = GeneratorConfig.from_dict({"indent_size": 2, "emit_docstrings": False})
        assert config.indent == "  "
        assert config.emit_docstrings is False

    @pytest.mark.parametrize(
        "data, message",
        [
            ({"indent": 2}, "unknown configuration keys: indent"),
            ({"indent_size": "2"}, "'indent_size' must be an integer"),
            ({"indent_size": True}, "'indent_size' must be an integer"),
            ({"emit_header": 1}, "'emit_header' must be a bool"),
            ({"indent_size": 0}, "indent_size must be between 1 and 8"),
            ({"runtime_module": "my-runtime"}, "'my-runtime' is not a module path"),
        ],
    )
    def test_from_dict_rejects(self, data, message):
        with pytest.raises(SchemaError) as excinfo:
            GeneratorConfig.from_dict(data)
        assert excinfo.value.message == message

    def test_from_file(self, tmp_path):
        path = tmp_path / "buildergen.json"
        path.write_text(json.dumps({"runtime_module": "app.runtime"}))

        config = GeneratorConfig.from_file(path)
        assert config.runtime_module == "app.runtime"

    def test_from_file_errors(self, tmp_path):
        with pytest.raises(SchemaError, match="cannot read configuration"):
            GeneratorConfig.from_file(tmp_path / "missing.json")

        path = tmp_path / "list.json"
        path.write_text("[]")
        with pytest.raises(SchemaError, match="must be a JSON object"):
            GeneratorConfig.from_file(path)

        path = tmp_path / "broken.json"
        path.write_text('{\n  "indent_size": \n}')
        with pytest.raises(SchemaError) as excinfo:
            GeneratorConfig.from_file(path)
        assert excinfo.value.location.line == 3

    def test_with_env(self):
        config = GeneratorConfig().with_env(
            {"BUILDERGEN_INDENT_SIZE": "2", "BUILDERGEN_RUNTIME_MODULE": "vendor.runtime"}
        )
        assert config.indent_size == 2
        assert config.runtime_module == "vendor.runtime"

    def test_with_env_invalid(self):
        with pytest.raises(SchemaError, match="must be an integer"):
            GeneratorConfig().with_env({"BUILDERGEN_INDENT_SIZE": "two"})
        with pytest.raises(SchemaError, match="between 1 and 8"):
            GeneratorConfig().with_env({"BUILDERGEN_INDENT_SIZE": "12"})

    def test_load_precedence(self, tmp_path):
        path = tmp_path / "buildergen.json"
        path.write_text(json.dumps({"indent_size": 2, "emit_header": False}))

        config = GeneratorConfig.load(path, {"BUILDERGEN_INDENT_SIZE": "3"})
        assert config.indent_size == 3
        assert config.emit_header is False

        assert GeneratorConfig.load(None, {}) == GeneratorConfig()


class TestLogging:
    """Logger namespace and handler setup."""

    @pytest.fixture(autouse=True)
    def restore_logging(self):
        yield
        reset_logging()

    def installed_handlers(self):
        logger = logging.getLogger("buildergen")
        return [h for h in logger.handlers if not isinstance(h, logging.NullHandler)]

    def test_get_logger_namespace(self):
        assert get_logger("buildergen.emitter").name == "buildergen.emitter"
        assert get_logger("plugins").name == "buildergen.plugins"
        assert get_logger("buildergen").name == "buildergen"

    def test_silent_library_logger(self):
        """Test the package logger only carries a NullHandler until configured."""
        logger = logging.getLogger("buildergen")
        assert any(isinstance(h, logging.NullHandler) for h in logger.handlers)
        assert self.installed_handlers() == []

    def test_setup_logging(self, tmp_path):
        log_file = tmp_path / "buildergen.log"
        stream = io.StringIO()
        logger = setup_logging("debug", str(log_file), stream=stream)

        assert logger.name == "buildergen"
        assert logger.level == logging.DEBUG
        assert logger.propagate is False
        assert len(self.installed_handlers()) == 2

        get_logger("tests").debug("hello")
        assert stream.getvalue() == "buildergen: DEBUG: hello\n"
        assert "buildergen.tests - DEBUG - hello" in log_file.read_text()

    def test_setup_twice_replaces_handlers(self):
        setup_logging("INFO", stream=io.StringIO())
        setup_logging("ERROR", stream=io.StringIO())

        assert len(self.installed_handlers()) == 1
        assert logging.getLogger("buildergen").level == logging.ERROR

    def test_reset_logging(self):
        setup_logging("DEBUG", stream=io.StringIO())
        reset_logging()

        logger = logging.getLogger("buildergen")
        assert self.installed_handlers() == []
        assert logger.propagate is True
        assert logger.level == logging.NOTSET

    def test_level_from_env(self, monkeypatch):
        monkeypatch.setenv("BUILDERGEN_LOG_LEVEL", "ERROR")
        assert resolve_level() == logging.ERROR
        assert setup_logging(stream=io.StringIO()).level == logging.ERROR

        monkeypatch.delenv("BUILDERGEN_LOG_LEVEL")
        assert resolve_level() == logging.WARNING

    def test_resolve_level(self):
        assert resolve_level(" info ") == logging.INFO
        assert resolve_level(logging.DEBUG) == logging.DEBUG
        with pytest.raises(ValueError, match="unknown log level 'LOUD'"):
            resolve_level("LOUD")
