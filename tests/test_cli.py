# ABOUTME: Tests for the configrepo command-line interface
# ABOUTME: Exercises path, status, skeleton, and show commands through CliRunner
import json
import logging
from pathlib import Path

import pytest
from click.testing import CliRunner

from configrepo.cli import cli


@pytest.fixture(autouse=True)
def reset_package_logger():
    """The CLI installs handlers bound to CliRunner's streams; drop them afterwards"""
    yield
    logger = logging.getLogger("configrepo")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def config_path(temp_config_dir):
    return str(Path(temp_config_dir) / "test.json")


class TestPathCommand:
    def test_derived_from_flags(self):
        runner = CliRunner()

        result = runner.invoke(cli, ["path", "--", "-configDir", "cfg/", "-environment", "test"])

        assert result.exit_code == 0
        assert "cfg/test.json" in result.output

    def test_default_path(self):
        result = CliRunner().invoke(cli, ["path"])

        assert result.exit_code == 0
        assert "./config/prod.json" in result.output

    def test_explicit_path(self):
        result = CliRunner().invoke(cli, ["--path", "/tmp/c.json", "path"])

        assert result.exit_code == 0
        assert "/tmp/c.json" in result.output

    def test_unknown_flag(self):
        result = CliRunner().invoke(cli, ["path", "--", "-bogus"])

        assert result.exit_code == 1
        assert "unrecognized arguments" in result.output


class TestSkeletonCommand:
    def test_writes_skeleton(self, config_path):
        runner = CliRunner()

        result = runner.invoke(cli, ["--path", config_path, "skeleton", "sample_models:ConfigModel"])

        assert result.exit_code == 0
        assert "Wrote skeleton" in result.output
        assert Path(config_path).read_text() == '{\n\t"name": "",\n\t"version": 0\n}'

    def test_refuses_existing_file(self, config_path):
        Path(config_path).write_text("{}")

        result = CliRunner().invoke(
            cli, ["--path", config_path, "skeleton", "sample_models:ConfigModel"]
        )

        assert result.exit_code == 1
        assert "file already exists" in result.output
        assert Path(config_path).read_text() == "{}"

    def test_bad_model_reference(self, config_path):
        runner = CliRunner()

        for reference in ["no_colon", "missing_module_xyz:Model", "sample_models:Nope"]:
            result = runner.invoke(cli, ["--path", config_path, "skeleton", reference])
            assert result.exit_code == 2

        assert not Path(config_path).exists()

    def test_invalid_model_class(self, config_path):
        result = CliRunner().invoke(
            cli, ["--path", config_path, "skeleton", "sample_models:FrozenModel"]
        )

        assert result.exit_code == 2
        assert "model is empty or no valid struct" in result.output


class TestStatusCommand:
    def test_missing_file_is_empty(self, config_path):
        result = CliRunner().invoke(cli, ["--path", config_path, "status", "sample_models:ConfigModel"])

        assert result.exit_code == 0
        assert "empty" in result.output

    def test_present_file(self, config_path):
        Path(config_path).write_text("{}")

        result = CliRunner().invoke(cli, ["--path", config_path, "status", "sample_models:ConfigModel"])

        assert result.exit_code == 0
        assert "present" in result.output


class TestShowCommand:
    def test_prints_loaded_model(self, config_path):
        Path(config_path).write_text('{"name": "x", "version": 1}')

        result = CliRunner().invoke(cli, ["--path", config_path, "show", "sample_models:ConfigModel"])

        assert result.exit_code == 0
        assert json.loads(result.output) == {"name": "x", "version": 1}

    def test_missing_file(self, config_path):
        result = CliRunner().invoke(cli, ["--path", config_path, "show", "sample_models:ConfigModel"])

        assert result.exit_code == 1
        assert "Error" in result.output

    def test_flags_resolve_path(self, temp_config_dir):
        (Path(temp_config_dir) / "staging.json").write_text('{"port": 9000}')

        result = CliRunner().invoke(
            cli,
            [
                "show",
                "sample_models:ServiceSettings",
                "--",
                "-configDir",
                f"{temp_config_dir}/",
                "-environment",
                "staging",
            ],
        )

        assert result.exit_code == 0
        assert json.loads(result.output)["port"] == 9000
