"""Unit tests for the CLI — Typer command registration and behavior."""

from __future__ import annotations

from typer.testing import CliRunner

from fanlog.cli.app import app

runner = CliRunner()


class TestCliApp:
    def test_no_args_shows_help(self):
        result = runner.invoke(app, [])
        assert result.exit_code in (0, 2)
        assert "usage" in result.output.lower()

    def test_help_lists_commands(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "emit" in result.output
        assert "levels" in result.output
        assert "telegram-test" in result.output


class TestLevelsCommand:
    def test_lists_codes(self):
        result = runner.invoke(app, ["levels"])
        assert result.exit_code == 0
        for code in ("FTL", "ERR", "WRN", "INF", "DBG"):
            assert code in result.output

    def test_invalid_threshold(self):
        result = runner.invoke(app, ["levels", "--threshold", "loud"])
        assert result.exit_code == 2


class TestEmitCommand:
    def test_emit_to_console(self):
        result = runner.invoke(app, ["emit", "error", "disk", "full"])
        assert result.exit_code == 0
        assert "ERR: " in result.output
        assert "disk full" in result.output

    def test_emit_formatted(self):
        result = runner.invoke(app, ["emit", "--format", "warning", "%s-%s", "a", "b"])
        assert result.exit_code == 0
        assert "WRN: " in result.output
        assert "a-b" in result.output

    def test_emit_above_threshold_is_silent(self):
        result = runner.invoke(app, ["emit", "debug", "quiet"])
        assert result.exit_code == 0
        assert "quiet" not in result.output

    def test_threshold_override(self):
        result = runner.invoke(app, ["emit", "--threshold", "debug", "debug", "loud"])
        assert result.exit_code == 0
        assert "DBG: " in result.output

    def test_prefix_override(self):
        result = runner.invoke(app, ["emit", "--prefix", "cron", "info", "hi"])
        assert result.exit_code == 0
        assert "-cron " in result.output

    def test_emit_fatal_exits_nonzero(self):
        result = runner.invoke(app, ["emit", "fatal", "dead"])
        assert result.exit_code == 1
        assert "FTL: " in result.output

    def test_invalid_level(self):
        result = runner.invoke(app, ["emit", "chatty", "x"])
        assert result.exit_code == 2


class TestTelegramTestCommand:
    def test_unconfigured(self):
        result = runner.invoke(app, ["telegram-test"])
        assert result.exit_code == 2
        assert "not configured" in result.output

    def test_success_closes_sink_session(self, monkeypatch, fake_session):
        monkeypatch.setenv("FANLOG_TELEGRAM_CONN", "tok")
        monkeypatch.setenv("FANLOG_TELEGRAM_CHAT_IDS", '["1"]')
        monkeypatch.setattr(
            "fanlog.routing.sinks.telegram.build_session", lambda endpoint: fake_session
        )

        result = runner.invoke(app, ["telegram-test", "--message", "ping"])

        assert result.exit_code == 0
        assert "succeeded" in result.output
        assert fake_session.texts[0].endswith("ping")
        assert fake_session.closed is True

    def test_delivery_failure_closes_sink_session(
        self, monkeypatch, fake_session, fake_response
    ):
        monkeypatch.setenv("FANLOG_TELEGRAM_CONN", "tok")
        monkeypatch.setenv("FANLOG_TELEGRAM_CHAT_IDS", '["1"]')
        monkeypatch.setattr(
            "fanlog.routing.sinks.telegram.build_session", lambda endpoint: fake_session
        )
        fake_session.outcomes["1"] = fake_response(500, b"")

        result = runner.invoke(app, ["telegram-test"])

        assert result.exit_code == 1
        assert "Delivery failed" in result.output
        assert fake_session.closed is True
