"""Unit tests for the share commands."""

import base64

from typer.testing import CliRunner

from slothodoro.commands.share import app
from slothodoro.utils import result_codec
from slothodoro.utils.exit_codes import ERROR_DECODE, ERROR_NOT_FOUND

runner = CliRunner()


class TestShareLink:
    def test_no_result_yet(self):
        result = runner.invoke(app, ["link"])
        assert result.exit_code == ERROR_NOT_FOUND
        assert "No result to share yet" in result.output

    def test_prints_link(self, completed_session):
        result = runner.invoke(app, ["link"])
        assert result.exit_code == 0
        link = result.output.strip()
        assert link.startswith(result_codec.SHARE_BASE_URL + "#r=")
        token = result_codec.token_from_fragment(link)
        assert result_codec.decode(token)["focusMinutes"] == 25


class TestShareCard:
    def test_card(self, completed_session):
        result = runner.invoke(app, ["card"])
        assert result.exit_code == 0
        assert "Slothodoro" in result.output
        assert "Focus sessions (all time): 1" in result.output

    def test_card_without_result(self):
        result = runner.invoke(app, ["card"])
        assert result.exit_code == 0
        assert "25 min" in result.output


class TestShareLoad:
    def test_load_link(self, completed_session, cli_repository, store):
        record = completed_session.last_result.to_record()
        store.data.clear()

        result = runner.invoke(app, ["load", result_codec.share_url(record)])

        assert result.exit_code == 0
        assert "Loaded result" in result.output
        loaded = cli_repository.load()
        assert loaded.last_result == completed_session.last_result
        assert loaded.stats.focus_sessions == 0

    def test_load_deeply_nested_token(self, cli_repository):
        token = base64.urlsafe_b64encode(b"[" * 200_000).decode().rstrip("=")
        result = runner.invoke(app, ["load", "#r=" + token])
        assert result.exit_code == ERROR_DECODE
        assert cli_repository.load().last_result is None

    def test_load_garbage(self, cli_repository):
        result = runner.invoke(app, ["load", "#r=A"])
        assert result.exit_code == ERROR_DECODE
        assert cli_repository.load().last_result is None
