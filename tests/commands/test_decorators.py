"""Unit tests for command decorators."""

import pytest
import typer

from slothodoro.commands.decorators import AppError, command_wrapper


class TestAppError:
    def test_default_exit_code(self):
        assert AppError("boom").exit_code == 1

    def test_custom_exit_code(self):
        error = AppError("bad token", exit_code=3)
        assert error.exit_code == 3
        assert str(error) == "bad token"


class TestCommandWrapper:
    def test_returns_result(self):
        @command_wrapper
        def cmd():
            return 42

        assert cmd() == 42

    def test_preserves_name(self):
        @command_wrapper
        def show_stats():
            pass

        assert show_stats.__name__ == "show_stats"

    def test_app_error_becomes_exit(self):
        @command_wrapper
        def cmd():
            raise AppError("nothing to share", exit_code=5)

        with pytest.raises(typer.Exit) as exc_info:
            cmd()
        assert exc_info.value.exit_code == 5

    def test_typer_exit_passes_through(self):
        @command_wrapper
        def cmd():
            raise typer.Exit(code=0)

        with pytest.raises(typer.Exit) as exc_info:
            cmd()
        assert exc_info.value.exit_code == 0

    def test_unexpected_error_exits_one(self):
        @command_wrapper
        def cmd():
            raise RuntimeError("disk on fire")

        with pytest.raises(typer.Exit) as exc_info:
            cmd()
        assert exc_info.value.exit_code == 1

    def test_failure_is_logged(self):
        from slothodoro.utils.logger import get_logger

        @command_wrapper
        def cmd():
            raise RuntimeError("disk on fire")

        with pytest.raises(typer.Exit):
            cmd()

        logger = get_logger()
        for handler in logger.handlers:
            handler.flush()
        log_file = logger.handlers[0].baseFilename
        with open(log_file, encoding="utf-8") as fh:
            content = fh.read()
        assert "command failed: cmd" in content
        assert "[ERROR_GENERAL]" in content
        assert "disk on fire" in content

    def test_app_error_log_names_exit_code(self):
        from slothodoro.utils.logger import get_logger

        @command_wrapper
        def share_link():
            raise AppError("nothing to share", exit_code=5)

        with pytest.raises(typer.Exit):
            share_link()

        logger = get_logger()
        for handler in logger.handlers:
            handler.flush()
        with open(logger.handlers[0].baseFilename, encoding="utf-8") as fh:
            content = fh.read()
        assert "[ERROR_NOT_FOUND]" in content
        assert "nothing to share" in content
