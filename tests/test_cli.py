"""Tests for the CLI module."""

import json
from datetime import datetime

import pytest
from click.testing import CliRunner

from contact_spam_guard.cli import cli
from contact_spam_guard.store import SubmissionStore


@pytest.fixture
def db_path(tmp_path, monkeypatch):
    path = tmp_path / "store.db"
    monkeypatch.setenv("CONTACT_GUARD_DB_PATH", str(path))
    return path


def test_cli_help():
    """CLI --help should work and show commands."""
    runner = CliRunner()
    result = runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    for command in ("serve", "check", "validate", "rules", "submissions", "export", "auth", "store"):
        assert command in result.output


def test_cli_version():
    """CLI --version should show version."""
    runner = CliRunner()
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "0.1.0" in result.output


def test_check_spam():
    runner = CliRunner()
    result = runner.invoke(cli, ["check", "Buy cheap viagra online"])
    assert result.exit_code == 0
    assert "SPAM" in result.output
    assert "pharma" in result.output


def test_check_reads_stdin():
    runner = CliRunner()
    result = runner.invoke(cli, ["check"], input="Hello, could you call me back?")
    assert result.exit_code == 0
    assert "OK" in result.output


def test_check_invalid_threshold_env(monkeypatch):
    monkeypatch.setenv("CONTACT_GUARD_SPAM_THRESHOLD", "high")
    runner = CliRunner()
    result = runner.invoke(cli, ["check", "hello"])
    assert result.exit_code != 0
    assert "spam_threshold" in result.output


def test_rules_lists_defaults():
    runner = CliRunner()
    result = runner.invoke(cli, ["rules"])
    assert result.exit_code == 0
    assert "pharma" in result.output
    assert "Scored Rules" in result.output


def test_rules_bad_file(tmp_path):
    path = tmp_path / "rules.json"
    path.write_text("{broken")
    runner = CliRunner()
    result = runner.invoke(cli, ["rules", "--rules", str(path)])
    assert result.exit_code != 0
    assert "not valid JSON" in result.output


def test_validate_accepts(tmp_path, valid_fields):
    path = tmp_path / "payload.json"
    path.write_text(json.dumps(valid_fields))
    runner = CliRunner()
    result = runner.invoke(cli, ["validate", str(path)])
    assert result.exit_code == 0
    assert "Accepted" in result.output


def test_validate_rejects(tmp_path, valid_fields):
    path = tmp_path / "payload.json"
    path.write_text(json.dumps({**valid_fields, "name": "John3"}))
    runner = CliRunner()
    result = runner.invoke(cli, ["validate", str(path)])
    assert result.exit_code == 1
    assert "INVALID_NAME" in result.output


def test_validate_malformed_payload(tmp_path):
    path = tmp_path / "payload.json"
    path.write_text("[1, 2]")
    runner = CliRunner()
    result = runner.invoke(cli, ["validate", str(path)])
    assert result.exit_code != 0
    assert "Error" in result.output


def test_submissions_empty(db_path):
    runner = CliRunner()
    result = runner.invoke(cli, ["submissions"])
    assert result.exit_code == 0
    assert "No submissions stored" in result.output


def test_submissions_lists_rows(db_path, valid_submission):
    with SubmissionStore(db_path=db_path) as store:
        store.record(valid_submission, datetime(2024, 1, 1))

    runner = CliRunner()
    result = runner.invoke(cli, ["submissions"])
    assert result.exit_code == 0
    assert "Total submissions shown: 1" in result.output


def test_export_without_data(db_path, tmp_path):
    runner = CliRunner()
    result = runner.invoke(cli, ["export", "-o", str(tmp_path / "out.csv")])
    assert result.exit_code != 0
    assert "No submissions stored" in result.output


def test_export_json(db_path, tmp_path, valid_submission):
    with SubmissionStore(db_path=db_path) as store:
        store.record(valid_submission, datetime(2024, 1, 1))

    out = tmp_path / "out.json"
    runner = CliRunner()
    result = runner.invoke(cli, ["export", "--format", "json", "-o", str(out)])
    assert result.exit_code == 0
    assert json.loads(out.read_text())[0]["name"] == "Jane O'Neil"


def test_store_info_empty(db_path):
    """Store info on an empty store should not crash."""
    runner = CliRunner()
    result = runner.invoke(cli, ["store", "info"])
    assert result.exit_code == 0
    assert "Store is empty" in result.output


def test_store_clear(db_path, valid_submission):
    """Store clear should work."""
    with SubmissionStore(db_path=db_path) as store:
        store.record(valid_submission, datetime(2024, 1, 1))

    runner = CliRunner()
    result = runner.invoke(cli, ["store", "clear", "--yes"])
    assert result.exit_code == 0
    assert "Store cleared" in result.output

    with SubmissionStore(db_path=db_path) as store:
        assert store.count() == 0
