"""Tests for the cbreak keyboard reader, with the terminal calls patched out."""

import io
import termios
from unittest.mock import MagicMock, patch

import pytest

from slothodoro.models.focus.keyboard import KeyboardHandler

MODULE = "slothodoro.models.focus.keyboard"


class FakeStdin(io.StringIO):
    def fileno(self):
        return 0


@pytest.fixture
def terminal():
    stdin = FakeStdin("Q")
    with patch(f"{MODULE}.sys.stdin", stdin), patch(
        f"{MODULE}.termios.tcgetattr", return_value=["saved"]
    ) as tcgetattr, patch(f"{MODULE}.termios.tcsetattr") as tcsetattr, patch(
        f"{MODULE}.tty.setcbreak"
    ) as setcbreak, patch(f"{MODULE}.select.select") as select:
        yield MagicMock(
            stdin=stdin,
            tcgetattr=tcgetattr,
            tcsetattr=tcsetattr,
            setcbreak=setcbreak,
            select=select,
        )


def test_enters_cbreak_mode(terminal):
    KeyboardHandler()
    terminal.setcbreak.assert_called_once_with(0)


def test_no_key_waiting(terminal):
    terminal.select.return_value = ([], [], [])
    assert KeyboardHandler().get_key() is None


def test_key_is_lowercased(terminal):
    terminal.select.return_value = ([terminal.stdin], [], [])
    assert KeyboardHandler().get_key() == "q"


def test_stop_restores_settings_once(terminal):
    handler = KeyboardHandler()
    handler.stop()
    handler.stop()
    terminal.tcsetattr.assert_called_once_with(0, termios.TCSADRAIN, ["saved"])


def test_not_a_tty(terminal):
    terminal.tcgetattr.side_effect = termios.error("not a tty")
    handler = KeyboardHandler()
    handler.stop()
    terminal.tcsetattr.assert_not_called()
