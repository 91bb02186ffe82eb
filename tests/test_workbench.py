"""Tests for playground configuration and CLI."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest
import yaml
from typer.testing import CliRunner

from playground.failures import FailureAnalyzer, FailureType
from playground.session import RunResult
from workbench.cli import app
from workbench.config import PlaygroundConfig, load_config, save_config

runner = CliRunner()


class TestPlaygroundConfig:
    def test_load_config_from_yaml(self, tmp_path: Path) -> None:
        config_path = tmp_path / "playground.yaml"
        with open(config_path, "w") as f:
            yaml.dump(
                {
                    "node_binary": "/usr/local/bin/node",
                    "node_path": "/opt/ts/node_modules",
                    "execution_timeout_s": 2,
                    "memory_limit_mb": 96,
                },
                f,
            )

        config = load_config(config_path)

        assert config.node_binary == "/usr/local/bin/node"
        assert config.node_path == "/opt/ts/node_modules"
        assert config.execution_timeout_s == 2.0
        assert config.memory_limit_mb == 96
        assert config.ts_target == "ES2020"
        assert config.ts_module == "ESNext"

    def test_load_config_missing_file(self) -> None:
        with pytest.raises(FileNotFoundError):
            load_config("nonexistent.yaml")

    def test_load_config_empty_file(self, tmp_path: Path) -> None:
        config_path = tmp_path / "empty.yaml"
        config_path.write_text("")
        with pytest.raises(ValueError):
            load_config(config_path)

    def test_load_config_rejects_bad_values(self, tmp_path: Path) -> None:
        config_path = tmp_path / "bad.yaml"
        config_path.write_text("execution_timeout_s: -1\n")
        with pytest.raises(ValueError):
            load_config(config_path)

    def test_shipped_config_loads(self) -> None:
        config = load_config(Path(__file__).resolve().parents[1] / "configs" / "playground.yaml")
        assert config == PlaygroundConfig()

    def test_save_and_reload(self, tmp_path: Path) -> None:
        config = PlaygroundConfig(execution_timeout_s=3.0, default_code="console.log(0);")
        path = tmp_path / "nested" / "playground.yaml"
        save_config(config, path)
        assert load_config(path) == config


class TestFailureAnalyzer:
    @pytest.mark.parametrize(
        "line, expected",
        [
            ("Transpile error: TypeScript transpiler failed: exit code 1", FailureType.TRANSPILE_ERROR),
            ("Timeout after 5s", FailureType.TIMEOUT),
            ("JavaScript runtime not found: node", FailureType.INFRASTRUCTURE),
            ("SyntaxError: Unexpected end of input", FailureType.SYNTAX_ERROR),
            ("Error: boom", FailureType.RUNTIME_ERROR),
            ("TypeError: x is not a function", FailureType.RUNTIME_ERROR),
            ("something odd", FailureType.OTHER),
        ],
    )
    def test_classify(self, line, expected):
        assert FailureAnalyzer().classify_error(line) == expected

    def test_top_failures_skip_empty_buckets(self):
        analyzer = FailureAnalyzer()
        analyzer.record_failure("Error: a")
        analyzer.record_failure("Error: b")
        analyzer.record_failure("Timeout after 1s")
        assert analyzer.get_top_failures() == [("runtime_error", 2), ("timeout", 1)]


class TestCli:
    def test_examples(self):
        result = runner.invoke(app, ["examples"])
        assert result.exit_code == 0
        assert "Array map (javascript)" in result.output
        assert "TypeScript types (typescript)" in result.output

    def test_document_for_javascript_file(self, tmp_path: Path):
        source = tmp_path / "hello.js"
        source.write_text("console.log('</script>')")
        out = tmp_path / "out" / "sandbox.html"

        result = runner.invoke(app, ["document", str(source), "-o", str(out)])

        assert result.exit_code == 0
        html = out.read_text()
        assert html.startswith("<!doctype html>")
        assert "console.log('<\\/script>')" in html

    def test_document_iframe_to_stdout(self, tmp_path: Path):
        source = tmp_path / "hello.js"
        source.write_text("console.log(1)")
        result = runner.invoke(app, ["document", str(source), "--iframe"])
        assert result.exit_code == 0
        assert 'sandbox="allow-scripts"' in result.output

    def test_missing_source(self):
        result = runner.invoke(app, ["run", "does-not-exist.js"])
        assert result.exit_code == 1
        assert "Source file not found" in result.output

    def test_missing_config(self, tmp_path: Path):
        source = tmp_path / "a.js"
        source.write_text("console.log(1)")
        result = runner.invoke(app, ["run", str(source), "--config", str(tmp_path / "nope.yaml")])
        assert result.exit_code == 1
        assert "Config file not found" in result.output

    def test_invalid_language(self, tmp_path: Path):
        source = tmp_path / "a.js"
        source.write_text("console.log(1)")
        result = runner.invoke(app, ["run", str(source), "--language", "python"])
        assert result.exit_code == 1
        assert "Invalid language" in result.output

    def test_run_prints_output(self, tmp_path: Path):
        source = tmp_path / "a.ts"
        source.write_text("const x: number = 5; console.log(x);")
        with patch("workbench.cli.PlaygroundSession.run") as mock_run:
            mock_run.return_value = RunResult(generation=1, language="typescript", output=["5"])
            result = runner.invoke(app, ["run", str(source)])
        assert result.exit_code == 0
        assert result.output.strip() == "5"

    def test_run_with_errors_exits_nonzero(self, tmp_path: Path):
        source = tmp_path / "a.js"
        source.write_text("throw new Error('boom')")
        with patch("workbench.cli.PlaygroundSession.run") as mock_run:
            mock_run.return_value = RunResult(generation=1, language="javascript", errors=["Error: boom"])
            result = runner.invoke(app, ["run", str(source)])
        assert result.exit_code == 1
        assert "Error: boom" in result.output
        assert "runtime_error=1" in result.output

    def test_run_example_unknown(self):
        result = runner.invoke(app, ["run-example", "Nope"])
        assert result.exit_code == 1
        assert "Unknown example" in result.output

    def test_snippets_listing(self, tmp_path: Path):
        lesson = tmp_path / "lesson.md"
        lesson.write_text("# Lesson\n\n```playground\nconsole.log('try me')\n```\n")
        result = runner.invoke(app, ["snippets", str(lesson)])
        assert result.exit_code == 0
        assert "Found 1 snippet(s)" in result.output
        assert "console.log('try me')" in result.output

    def test_snippets_index_out_of_range(self, tmp_path: Path):
        lesson = tmp_path / "lesson.md"
        lesson.write_text("```playground\nconsole.log(1)\n```\n")
        result = runner.invoke(app, ["snippets", str(lesson), "--run", "3"])
        assert result.exit_code == 1
        assert "out of range" in result.output

    def test_run_javascript_end_to_end(self, tmp_path: Path, node_binary):
        source = tmp_path / "a.js"
        source.write_text("console.log('a', 1); console.log([1, 2]);")
        config_path = tmp_path / "playground.yaml"
        save_config(PlaygroundConfig(node_binary=node_binary), config_path)
        result = runner.invoke(app, ["run", str(source), "--config", str(config_path)])
        assert result.exit_code == 0
        assert result.output.splitlines() == ["a 1", "[1,2]"]
