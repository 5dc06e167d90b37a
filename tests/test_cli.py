"""Tests for the scopeid CLI."""

from __future__ import annotations

import logging

import pytest
from click.testing import CliRunner

from scopeid.cli.main import cli


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers bound to CliRunner's streams after each test."""
    yield
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)


def _invoke(data_dir, *args: str):
    runner = CliRunner()
    return runner.invoke(
        cli,
        ["--config", str(data_dir / "missing.yaml"), "--data-dir", str(data_dir), *args],
    )


class TestCliHelp:
    def test_help(self):
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "next" in result.output
        assert "last" in result.output
        assert "seed" in result.output

    def test_next_help(self):
        result = CliRunner().invoke(cli, ["next", "--help"])
        assert result.exit_code == 0
        assert "--count" in result.output


class TestNext:
    def test_issues_ids(self, tmp_path):
        result = _invoke(tmp_path, "next", "orders", "--count", "3")
        assert result.exit_code == 0, result.output
        assert result.stdout.split() == ["1", "2", "3"]
        assert (tmp_path / "orders.txt").read_text() == "101"

    def test_each_run_reserves_a_new_batch(self, tmp_path):
        _invoke(tmp_path, "next", "orders")
        result = _invoke(tmp_path, "next", "orders")
        assert result.stdout.split() == ["101"]

    def test_batch_size_option(self, tmp_path):
        _invoke(tmp_path, "--batch-size", "1", "next", "orders")
        result = _invoke(tmp_path, "--batch-size", "1", "next", "orders")
        assert result.stdout.split() == ["2"]

    def test_corrupt_record(self, tmp_path):
        (tmp_path / "orders.txt").write_text("oops")
        result = _invoke(tmp_path, "next", "orders")
        assert result.exit_code == 1
        assert "corrupt" in result.output
        assert (tmp_path / "orders.txt").read_text() == "oops"

    def test_invalid_scope_name(self, tmp_path):
        result = _invoke(tmp_path, "next", "../etc")
        assert result.exit_code == 1
        assert "Invalid scope name" in result.output


class TestLast:
    def test_reports_store_value_for_fresh_process(self, tmp_path):
        _invoke(tmp_path, "next", "orders")
        result = _invoke(tmp_path, "last", "orders")
        assert result.exit_code == 0
        assert result.stdout.strip() == "101"


class TestSeed:
    def test_seed_then_next(self, tmp_path):
        result = _invoke(tmp_path, "seed", "orders", "500")
        assert result.exit_code == 0
        assert "Seeded orders at 500" in result.output
        assert (tmp_path / "orders.txt").read_text() == "600"

        result = _invoke(tmp_path, "next", "orders")
        assert result.stdout.split() == ["600"]

    def test_rejects_lower_seed(self, tmp_path):
        _invoke(tmp_path, "next", "orders")
        result = _invoke(tmp_path, "seed", "orders", "5")
        assert result.exit_code == 1
        assert "cannot be less than" in result.output
        assert (tmp_path / "orders.txt").read_text() == "101"


class TestConfigFile:
    def test_config_file_batch_size(self, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text(f"batch_size: 5\nstore:\n  data_dir: {tmp_path / 'ids'}\n")
        result = CliRunner().invoke(cli, ["--config", str(config), "next", "orders"])
        assert result.exit_code == 0, result.output
        assert (tmp_path / "ids" / "orders.txt").read_text() == "6"

    def test_invalid_config_is_usage_error(self, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text("max_write_attempts: 0\n")
        result = CliRunner().invoke(
            cli, ["--config", str(config), "--data-dir", str(tmp_path), "next", "orders"]
        )
        assert result.exit_code == 2
        assert "max_write_attempts" in result.output


class TestLazySetup:
    def test_subcommand_help_skips_config_and_store(self, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text("max_write_attempts: 0\n")
        data_dir = tmp_path / "ids"
        handlers_before = list(logging.getLogger().handlers)

        result = CliRunner().invoke(
            cli, ["--config", str(config), "--data-dir", str(data_dir), "next", "--help"]
        )

        assert result.exit_code == 0
        assert "--count" in result.output
        assert not data_dir.exists()
        assert logging.getLogger().handlers == handlers_before

    def test_json_logs_reach_stderr(self, tmp_path):
        import json

        result = _invoke(tmp_path, "--json-logs", "--log-level", "DEBUG", "next", "orders")
        assert result.exit_code == 0, result.output

        lines = [line for line in result.output.splitlines() if line.startswith("{")]
        events = [json.loads(line)["event"] for line in lines]
        assert "Reserved ids 1-100 for scope orders (attempt 1)" in events
