"""
Tests for the command-line interface.
"""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from athlete_risk.cli import app


FIXTURES = Path(__file__).parent / "fixtures"

runner = CliRunner()


def invoke(database_url, *args):
    # wide console so table cells do not wrap
    return runner.invoke(app, ["--database", database_url, *args], env={"COLUMNS": "200"})


# Fixtures

@pytest.fixture
def registered(database_url):
    result = invoke(database_url, "add-athlete", "athlete_1", "--name", "Jordan Lee", "--sport", "Soccer")
    assert result.exit_code == 0, result.output
    return result


@pytest.fixture
def logged(database_url, registered):
    result = invoke(database_url, "log-activity", "--file", str(FIXTURES / "workout_cardio.json"))
    assert result.exit_code == 0, result.output
    return result


# Test Cases


def test_init_db(database_url):
    result = invoke(database_url, "init-db")
    assert result.exit_code == 0
    assert "Database ready" in result.output


def test_add_athlete(registered):
    assert "Added athlete athlete_1" in registered.output


def test_add_duplicate_athlete_fails(database_url, registered):
    result = invoke(database_url, "add-athlete", "athlete_1", "--name", "Again")
    assert result.exit_code == 1
    assert "Failed to add athlete" in result.output


def test_log_activity(logged):
    assert "Logged workout activity #1" in logged.output
    assert "Overall risk" in logged.output


def test_log_activity_for_other_athlete(database_url, registered):
    invoke(database_url, "add-athlete", "athlete_2", "--name", "Sam Ortiz")
    result = invoke(
        database_url, "log-activity", "--file", str(FIXTURES / "workout_cardio.json"), "--athlete", "athlete_2"
    )
    assert result.exit_code == 0, result.output
    assert "for athlete_2" in result.output


def test_risk(database_url, logged):
    result = invoke(database_url, "risk", "athlete_1", "--date", "2024-03-04")
    assert result.exit_code == 0, result.output
    assert "Left Leg" in result.output
    assert "LOW" in result.output


def test_risk_unknown_athlete(database_url):
    result = invoke(database_url, "risk", "nobody", "--date", "2024-03-04")
    assert result.exit_code == 1


def test_risk_rejects_bad_date(database_url, registered):
    result = invoke(database_url, "risk", "athlete_1", "--date", "yesterday")
    assert result.exit_code == 1
    assert "Invalid date" in result.output


def test_history(database_url, logged):
    result = invoke(database_url, "history", "athlete_1", "--body-part", "chest")
    assert result.exit_code == 0, result.output
    assert "2024-03-04" in result.output


def test_history_empty(database_url, registered):
    result = invoke(database_url, "history", "athlete_1")
    assert "No workload history" in result.output


def test_recover(database_url, logged):
    result = invoke(database_url, "recover", "--date", "2024-03-05")
    assert result.exit_code == 0, result.output
    assert "Updated recovery rates for 6 body parts" in result.output


def test_delete_activity(database_url, logged):
    result = invoke(database_url, "delete-activity", "1")
    assert result.exit_code == 0, result.output
    assert "Deleted activity #1" in result.output

    assert invoke(database_url, "delete-activity", "1").exit_code == 1


def test_config(database_url):
    result = invoke(database_url, "config")
    assert result.exit_code == 0, result.output
    assert "Risk Thresholds" in result.output
    assert "Critical" in result.output
