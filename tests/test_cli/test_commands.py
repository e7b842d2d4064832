"""CLI tests for classify, scripts and run commands."""

import pytest
import json
import sys
from pathlib import Path
from unittest.mock import patch
from click.testing import CliRunner

project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from docscript.cli import main as cli_main

DYNAMIC = (
    '<svg xmlns="http://www.w3.org/2000/svg" contentScriptType="text/python">'
    '<script type="text/python">x = 1</script>'
    '<script type="text/python" href="http://other.org/lib.py"/>'
    '<rect onload="y = 2"/>'
    "</svg>"
)

STATIC = '<svg xmlns="http://www.w3.org/2000/svg"><rect/></svg>'


@pytest.fixture
def runner():
    """CLI runner."""
    return CliRunner()


@pytest.fixture
def dynamic_path(tmp_path):
    path = tmp_path / "dynamic.svg"
    path.write_text(DYNAMIC)
    return str(path)


@pytest.fixture
def static_path(tmp_path):
    path = tmp_path / "static.svg"
    path.write_text(STATIC)
    return str(path)


@pytest.fixture(autouse=True)
def no_extensions():
    """Keep installed extensions out of CLI runs."""
    with patch("docscript.cli.classify.load_extensions", return_value=[]), \
            patch("docscript.cli.run.load_extensions", return_value=[]):
        yield


class TestClassifyCommand:
    """Tests for the classify CLI command."""

    def test_dynamic(self, runner, dynamic_path):
        """Test a document with scripts is dynamic."""
        result = runner.invoke(cli_main, ["classify", dynamic_path])
        assert result.exit_code == 0
        assert result.output.strip() == "dynamic"

    def test_static_json(self, runner, static_path):
        """Test JSON output for a static document."""
        result = runner.invoke(cli_main, ["classify", static_path, "-j"])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["dynamic"] is False

    def test_missing_document(self, runner):
        """Test classify with non-existent document."""
        result = runner.invoke(cli_main, ["classify", "/nonexistent/doc.svg"])
        assert result.exit_code != 0

    def test_malformed_document(self, runner, tmp_path):
        """Test classify with malformed markup."""
        path = tmp_path / "bad.svg"
        path.write_text("<svg><g></svg>")
        result = runner.invoke(cli_main, ["classify", str(path)])
        assert result.exit_code == 1
        assert "Error" in result.output


class TestScriptsCommand:
    """Tests for the scripts CLI command."""

    def test_lists_scripts(self, runner, dynamic_path):
        """Test both scripts are listed with their status."""
        result = runner.invoke(cli_main, ["scripts", dynamic_path, "--json-output"])
        assert result.exit_code == 0
        scripts = json.loads(result.stdout)
        assert [s["valid"] for s in scripts] == [True, False]
        assert scripts[1]["href"] == "http://other.org/lib.py"

    def test_text_output(self, runner, dynamic_path):
        """Test the text listing."""
        result = runner.invoke(cli_main, ["scripts", dynamic_path])
        assert result.exit_code == 0
        assert "refused" in result.output


class TestRunCommand:
    """Tests for the run CLI command."""

    def test_run_json(self, runner, dynamic_path):
        """Test a run reports one executed and one refused script."""
        result = runner.invoke(cli_main, ["run", dynamic_path, "-j"])
        assert result.exit_code == 0
        output = json.loads(result.stdout)
        assert output["report"]["counts"]["executed"] == 1
        assert output["report"]["counts"]["skipped"] == 1
        assert output["errors"][0]["kind"] == "POLICY_DENIED"

    def test_origin_override(self, runner, dynamic_path):
        """Test --origin none refuses every script."""
        result = runner.invoke(cli_main, ["run", dynamic_path, "-j", "--origin", "none"])
        assert result.exit_code == 0
        output = json.loads(result.stdout)
        assert output["report"]["counts"]["executed"] == 0

    def test_static_document(self, runner, static_path):
        """Test a static document is not run."""
        result = runner.invoke(cli_main, ["run", static_path])
        assert result.exit_code == 0
        assert "static" in result.output

    def test_no_load_event(self, runner, dynamic_path):
        """Test --no-load-event skips the load dispatch."""
        with patch("docscript.cli.run.ScriptingEnvironment.dispatch_svg_load_event") as dispatch:
            result = runner.invoke(cli_main, ["run", dynamic_path, "--no-load-event"])
        assert result.exit_code == 0
        dispatch.assert_not_called()

    def test_invalid_config(self, runner, dynamic_path, tmp_path):
        """Test an invalid config file exits with status 1."""
        config = tmp_path / "config.json"
        config.write_text(json.dumps({"script_origin": "sometimes"}))
        result = runner.invoke(cli_main, ["run", dynamic_path, "-c", str(config)])
        assert result.exit_code == 1
