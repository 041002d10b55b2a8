from __future__ import annotations

import os
from collections.abc import Generator
from pathlib import Path

import pytest

from scriptcore.core.entry import ScriptEntry


@pytest.fixture(scope="session", autouse=True)
def _load_dotenv_for_tests() -> None:
    """Load repo .env for local runs.

    In CI, we *don't* auto-load `.env` so a developer's local queue settings can't leak in.
    Opt-in with: SCRIPTCORE_LOAD_DOTENV_FOR_TESTS=1
    """

    if os.environ.get("CI") and os.environ.get("SCRIPTCORE_LOAD_DOTENV_FOR_TESTS") != "1":
        return

    env_path = Path(__file__).resolve().parents[1] / ".env"
    if env_path.exists():
        from dotenv import load_dotenv

        load_dotenv(dotenv_path=env_path, override=False)


@pytest.fixture(autouse=True)
def _reset_process_state() -> Generator[None, None, None]:
    """Each test starts with no live queues and no cached command registry."""

    from scriptcore.commands.singleton import set_registry_for_tests
    from scriptcore.queues.directory import reset_queues_for_tests

    reset_queues_for_tests()
    set_registry_for_tests(None)
    yield
    reset_queues_for_tests()
    set_registry_for_tests(None)


class RecordingReporter:
    """Debug reporter that keeps everything in memory for assertions."""

    def __init__(self) -> None:
        self.reports: list[tuple[str, str]] = []
        self.errors: list[str] = []

    def report(self, entry: ScriptEntry | None, command_name: str, summary: str) -> None:
        self.reports.append((command_name, summary))

    def report_error(self, message: str) -> None:
        self.errors.append(message)


@pytest.fixture()
def reporter() -> RecordingReporter:
    return RecordingReporter()


class FakeActor:
    def __init__(self, name: str, *, online: bool = True) -> None:
        self.name = name
        self.is_online = online
        self.inbox: list[str] = []

    def send_message(self, text: str) -> None:
        self.inbox.append(text)


@pytest.fixture()
def actors() -> dict[str, FakeActor]:
    return {
        "alice": FakeActor("alice"),
        "bob": FakeActor("bob"),
        "carol": FakeActor("carol", online=False),
    }
