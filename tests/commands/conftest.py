"""Fixtures for CLI command tests.

Commands build their engine through ``slothodoro.commands.utils``; patching
``get_repository`` there keeps every invocation on an in-memory store.
"""

from __future__ import annotations

from datetime import datetime
from unittest.mock import patch

import pytest

from slothodoro.models.focus.ledger import StatsLedger
from slothodoro.models.state import PersistentState


@pytest.fixture(autouse=True)
def cli_repository(repository):
    with patch("slothodoro.commands.utils.get_repository", return_value=repository):
        yield repository


@pytest.fixture
def completed_session(cli_repository) -> PersistentState:
    """Store a state holding one focus session completed just now."""
    state = PersistentState()
    StatsLedger().record_focus(state, at=datetime.now().astimezone())
    state.cycles_since_long = 1
    cli_repository.save(state)
    return state
