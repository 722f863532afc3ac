"""Tests for the Mirrorline command line."""

import json
from datetime import datetime, timedelta
from pathlib import Path

import pytest
from typer.testing import CliRunner

from mirrorline.cli import cli

LEGACY_EXPLANATION = (
    "Writing gathered around the end of the week.\n\n"
    "Evidence:\n"
    "• 5 entries on Friday\n"
    "• 2 entries on Wednesday\n\n"
    "Contrast: no quiet days observed\n\n"
    "Confidence: based on 4 active days"
)


@pytest.fixture
def runner():
    """Create CLI test runner."""
    return CliRunner()


@pytest.fixture
def events_file(tmp_path: Path, spike_week_events) -> Path:
    path = tmp_path / "events.json"
    path.write_text(json.dumps(spike_week_events))
    return path


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    return tmp_path / "config" / "config.json"


def compute_args(events_file: Path, config_path: Path, *extra: str):
    return [
        "insights",
        "compute",
        str(events_file),
        "--start",
        "2025-01-06",
        "--end",
        "2025-01-12",
        "--tz",
        "UTC",
        "--config",
        str(config_path),
        *extra,
    ]


class TestInsightsCompute:
    """Tests for `insights compute`."""

    def test_json_output(self, runner, events_file, config_path):
        """The artifact is printed as JSON."""
        result = runner.invoke(cli, compute_args(events_file, config_path, "--json"))

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["horizon"] == "weekly"
        assert data["cards"]
        assert data["debug"]["event_count"] == 8
        assert data["window"]["end"].startswith("2025-01-12T23:59:59")

    def test_snapshots_round_trip(self, runner, events_file, config_path, tmp_path):
        """Snapshots written by one run are read by the next."""
        snapshots = tmp_path / "snapshots.json"
        args = compute_args(
            events_file, config_path, "--json", "--snapshots", str(snapshots), "--write-snapshots", str(snapshots)
        )

        first = runner.invoke(cli, args)
        assert first.exit_code == 0, first.output
        assert len(json.loads(snapshots.read_text())) == 2

        second = runner.invoke(cli, args)
        assert second.exit_code == 0, second.output
        assert all(item["occurrences"] == 2 for item in json.loads(snapshots.read_text()))

    def test_table_output(self, runner, events_file, config_path):
        """Without --json a summary table is printed."""
        result = runner.invoke(cli, compute_args(events_file, config_path))

        assert result.exit_code == 0, result.output
        assert "Weekly insights" in result.stdout
        assert "private text" not in result.stdout

    def test_unsupported_horizon(self, runner, events_file, config_path):
        """Unknown horizons exit with an error."""
        result = runner.invoke(cli, compute_args(events_file, config_path, "--horizon", "yearly"))

        assert result.exit_code == 1
        assert "UNSUPPORTED_HORIZON" in result.output

    def test_inverted_window(self, runner, events_file, config_path):
        """A start after the end exits with an error."""
        result = runner.invoke(
            cli,
            ["insights", "compute", str(events_file), "--start", "2025-01-12", "--end", "2025-01-06",
             "--tz", "UTC", "--config", str(config_path)],
        )

        assert result.exit_code == 1
        assert "INVALID_WINDOW" in result.output

    def test_unreadable_events(self, runner, tmp_path, config_path):
        """Malformed JSON exits with an error."""
        path = tmp_path / "broken.json"
        path.write_text("[{")

        result = runner.invoke(cli, compute_args(path, config_path))
        assert result.exit_code == 1


class TestInsightsValidate:
    """Tests for `insights validate`."""

    def write_card(self, tmp_path: Path, title: str) -> Path:
        path = tmp_path / "card.json"
        path.write_text(
            json.dumps(
                {
                    "id": "legacy-1",
                    "kind": "always_on_summary",
                    "title": title,
                    "explanation": LEGACY_EXPLANATION,
                }
            )
        )
        return path

    def test_compliant_card(self, runner, tmp_path):
        """A compliant card exits cleanly."""
        card = self.write_card(tmp_path, "Writing gathered around the end of the week")
        result = runner.invoke(cli, ["insights", "validate", str(card), "--json"])

        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == {"id": "legacy-1", "ok": True, "reasons": []}

    def test_metric_title_rejected(self, runner, tmp_path):
        """A metric title is rejected with status 1."""
        card = self.write_card(tmp_path, "You wrote 12 reflections")
        result = runner.invoke(cli, ["insights", "validate", str(card), "--json"])

        assert result.exit_code == 1
        assert json.loads(result.stdout)["ok"] is False


class TestInsightsDistribution:
    """Tests for `insights distribution`."""

    def test_month_narrative(self, runner, tmp_path, config_path):
        """Twenty even events read as a consistent month."""
        start = datetime(2025, 1, 1, 9)
        events = [
            {"id": f"e{index}", "event_at": (start + timedelta(days=index % 10)).isoformat(), "details": "text"}
            for index in range(20)
        ]
        path = tmp_path / "events.json"
        path.write_text(json.dumps({"events": events}))

        result = runner.invoke(
            cli,
            ["insights", "distribution", str(path), "--scope", "month", "--tz", "UTC",
             "--config", str(config_path), "--json"],
        )

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["shape"] == "normal"
        assert data["total_events"] == 20
        assert data["narrative"]["headline"] == "This month maintained consistent patterns"

    def test_insufficient_data(self, runner, events_file, config_path):
        """Too few events yield no narrative."""
        result = runner.invoke(
            cli,
            ["insights", "distribution", str(events_file), "--tz", "UTC", "--config", str(config_path), "--json"],
        )

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["shape"] == "insufficient_data"
        assert data["narrative"] is None

    def test_unknown_bucket(self, runner, events_file, config_path):
        """Unknown buckets exit with an error."""
        result = runner.invoke(
            cli,
            ["insights", "distribution", str(events_file), "--bucket", "fortnight", "--config", str(config_path)],
        )

        assert result.exit_code == 1
        assert "DISTRIBUTION_ERROR" in result.output


class TestEmergenceCommands:
    """Tests for `emergence regime` and `emergence dwell`."""

    def test_regime(self, runner):
        """The regime value is printed."""
        result = runner.invoke(cli, ["emergence", "regime", "3"])
        assert result.exit_code == 0
        assert result.stdout.strip() == "sparse-meaning"

    def test_regime_json(self, runner):
        """JSON output carries the count and regime."""
        result = runner.invoke(cli, ["emergence", "regime", "6", "--json"])
        assert json.loads(result.stdout) == {"count": 6, "regime": "dense-meaning"}

    def test_dwell_accumulates_through_state_file(self, runner, tmp_path):
        """The state file carries dwell between invocations."""
        state = tmp_path / "dwell.json"
        base = ["emergence", "dwell", "--count", "3", "--session-start", "2025-01-06T09:00:00",
                "--state", str(state), "--json"]

        first = runner.invoke(cli, base + ["--at", "2025-01-06T09:00:30"])
        assert first.exit_code == 0, first.output
        assert json.loads(first.stdout)["dwell_duration_ms"] == 0

        second = runner.invoke(cli, base + ["--at", "2025-01-06T09:01:00"])
        assert second.exit_code == 0, second.output
        data = json.loads(second.stdout)
        assert data["dwell_duration_ms"] == 30000
        assert data["current_regime"] == "sparse-meaning"

    def test_dwell_text_output(self, runner):
        """Text output names the regime."""
        result = runner.invoke(
            cli,
            ["emergence", "dwell", "--count", "0", "--session-start", "2025-01-06T09:00:00",
             "--at", "2025-01-06T09:00:00"],
        )
        assert result.exit_code == 0, result.output
        assert "silence-dominant" in result.stdout


class TestConfigCommands:
    """Tests for `config` commands."""

    def test_init_and_show(self, runner, config_path):
        """init writes the file and show prints it."""
        result = runner.invoke(
            cli, ["config", "init", "--config-path", str(config_path), "--default-horizon", "summary"]
        )
        assert result.exit_code == 0, result.output
        assert config_path.exists()

        shown = runner.invoke(cli, ["config", "show", "--config-path", str(config_path)])
        assert shown.exit_code == 0
        assert '"default_horizon": "summary"' in shown.stdout

    def test_show_missing(self, runner, config_path):
        """show fails when no config exists."""
        result = runner.invoke(cli, ["config", "show", "--config-path", str(config_path)])
        assert result.exit_code == 1
        assert "MISSING_CONFIG" in result.output

    def test_set_and_validate(self, runner, config_path):
        """set updates a value and validate accepts the file."""
        runner.invoke(cli, ["config", "init", "--config-path", str(config_path)])

        updated = runner.invoke(
            cli, ["config", "set", "engine.persistence_threshold", "5", "--config-path", str(config_path)]
        )
        assert updated.exit_code == 0, updated.output
        assert json.loads(config_path.read_text())["engine"]["persistence_threshold"] == 5

        validated = runner.invoke(cli, ["config", "validate", "--config-path", str(config_path)])
        assert validated.exit_code == 0
        assert "Persistence threshold: 5" in validated.stdout

    def test_set_invalid_value(self, runner, config_path):
        """Invalid values are refused."""
        runner.invoke(cli, ["config", "init", "--config-path", str(config_path)])
        result = runner.invoke(
            cli, ["config", "set", "engine.persistence_threshold", "0", "--config-path", str(config_path)]
        )
        assert result.exit_code == 1

    def test_set_summary_knob(self, runner, config_path):
        """Summary thresholds can be set from the command line."""
        runner.invoke(cli, ["config", "init", "--config-path", str(config_path)])
        result = runner.invoke(
            cli, ["config", "set", "engine.pattern_weeks", "8", "--config-path", str(config_path)]
        )
        assert result.exit_code == 0, result.output
        assert json.loads(config_path.read_text())["engine"]["pattern_weeks"] == 8
