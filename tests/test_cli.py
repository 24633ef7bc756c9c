"""Tests for the command-line interface."""

from datetime import date, datetime, timezone

import pytest

from loguru import logger

from ontrack import cli
from ontrack.config.loader import load_schedule
from ontrack.core.logger import setup_logger
from ontrack.domain.models import TimeEntry
from ontrack.scheduling.actuals import ActualAggregator

SCHEDULE_YAML = """
periods:
  - start: 2024-01-15
    clients:
      Acme:
        expected-hours: 15
        projects:
          Web:
            expected-hours: 5
"""


class FakeTogglClient:
    """Stands in for TogglClient, returning canned entries."""

    entries: list = []
    calls: list = []

    def __init__(self, api_token, **kwargs):
        self.api_token = api_token

    def fetch_entries(self, start, now, tz=None):
        FakeTogglClient.calls.append((start, now))
        return list(self.entries)


@pytest.fixture(autouse=True)
def quiet_logger():
    """Drop the stderr sink main() installs once the test is done."""
    yield
    setup_logger("off")


@pytest.fixture
def warnings_logged():
    """Collect warning messages logged during the test."""
    messages = []
    handler_id = logger.add(lambda m: messages.append(m.record["message"]), level="WARNING")
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def schedule_file(tmp_path):
    path = tmp_path / "toggl-ontrack.yaml"
    path.write_text(SCHEDULE_YAML)
    return path


@pytest.fixture
def fake_toggl(monkeypatch):
    FakeTogglClient.entries = [TimeEntry.from_hours("Acme", "Web", date(2024, 1, 15), 2)]
    FakeTogglClient.calls = []
    monkeypatch.setattr(cli, "TogglClient", FakeTogglClient)
    return FakeTogglClient


def run(schedule_file, *extra):
    return cli.main(
        ["--api-token", "token", "-i", str(schedule_file), "--as-of", "2024-01-17", *extra]
    )


class TestMain:
    """Tests for cli.main."""

    def test_prints_report(self, schedule_file, fake_toggl, capsys):
        assert run(schedule_file) == 0

        out = capsys.readouterr().out
        assert "Acme" in out
        assert "TOTAL:" in out
        assert fake_toggl.calls[0][0] == date(2024, 1, 15)

    def test_show_periods(self, schedule_file, fake_toggl, capsys):
        assert run(schedule_file, "-p") == 0
        assert "DIFFERENCE" in capsys.readouterr().out

    def test_writes_pdf(self, schedule_file, fake_toggl, tmp_path):
        output = tmp_path / "report.pdf"

        assert run(schedule_file, "-o", str(output)) == 0
        assert output.read_bytes().startswith(b"%PDF")

    def test_strict_fails_on_unmatched_entries(self, schedule_file, fake_toggl):
        fake_toggl.entries.append(TimeEntry.from_hours(None, None, date(2024, 1, 16), 1))

        assert run(schedule_file) == 0
        assert run(schedule_file, "--strict") == 1

    def test_missing_token(self, schedule_file, fake_toggl, monkeypatch):
        monkeypatch.delenv("TOGGL_API_TOKEN", raising=False)

        assert cli.main(["-i", str(schedule_file)]) == 1
        assert fake_toggl.calls == []

    def test_token_from_environment(self, schedule_file, fake_toggl, monkeypatch):
        monkeypatch.setenv("TOGGL_API_TOKEN", "from-env")

        assert cli.main(["-i", str(schedule_file), "--as-of", "2024-01-17"]) == 0

    def test_missing_input_file(self, tmp_path, fake_toggl):
        assert run(tmp_path / "missing.yaml") == 1

    def test_invalid_schedule(self, tmp_path, fake_toggl):
        path = tmp_path / "bad.yaml"
        path.write_text(SCHEDULE_YAML.replace("expected-hours: 5", "expected-hours: 50"))

        assert run(path) == 1
        assert fake_toggl.calls == []

    def test_toggl_error(self, schedule_file, monkeypatch):
        class FailingClient(FakeTogglClient):
            def fetch_entries(self, start, now, tz=None):
                raise cli.TogglError("boom")

        monkeypatch.setattr(cli, "TogglClient", FailingClient)

        assert run(schedule_file) == 1

    def test_rejects_unknown_verbosity(self, schedule_file):
        with pytest.raises(SystemExit):
            cli.main(["-v", "loud", "-i", str(schedule_file)])


class TestReportTime:
    """Tests for choosing the reporting moment."""

    NOW = datetime(2024, 1, 17, 15, 30, tzinfo=timezone.utc)

    def test_defaults_to_now(self):
        assert cli.report_time(None, self.NOW) == self.NOW

    def test_today_is_now(self):
        assert cli.report_time(date(2024, 1, 17), self.NOW) == self.NOW

    def test_past_date_ends_at_midnight(self):
        moment = cli.report_time(date(2024, 1, 16), self.NOW)

        assert moment.date() == date(2024, 1, 16)
        assert moment.hour == 23
        assert moment.tzinfo == timezone.utc

    def test_future_date_warns_and_uses_now(self, warnings_logged):
        assert cli.report_time(date(2024, 1, 20), self.NOW) == self.NOW
        assert any("2024-01-20" in message for message in warnings_logged)

    def test_past_date_does_not_warn(self, warnings_logged):
        cli.report_time(date(2024, 1, 16), self.NOW)
        assert warnings_logged == []


class TestWarnUnmatched:
    """Tests for unmatched time entry warnings."""

    def test_warns_per_unmatched_entry(self, schedule_file, warnings_logged):
        config = load_schedule(schedule_file)
        entries = [
            TimeEntry.from_hours("Acme", "Web", date(2024, 1, 15), 1),
            TimeEntry.from_hours(None, "Internal", date(2024, 1, 15), 1),
            TimeEntry.from_hours("Beta", None, date(2024, 1, 15), 1),
        ]

        assert cli.warn_unmatched(config, ActualAggregator(entries)) == 2
        assert any("has no client" in message for message in warnings_logged)
        assert any("No expected client/period matched" in message for message in warnings_logged)
