"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import io
from collections.abc import Callable, Iterator
from contextlib import contextmanager

import pytest

from genpkgbuild.prompter import Terminal


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch) -> None:
    """Keep the user's own config file out of the tests."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.delenv("GENPKGBUILD_CONFIG", raising=False)


class FakeTerminal(Terminal):
    def __init__(self, answers: str) -> None:
        self.output = io.StringIO()
        super().__init__(io.StringIO(answers), self.output)


@pytest.fixture
def fake_terminal() -> Callable[[str], Callable[[], Iterator[FakeTerminal]]]:
    """
    Build a drop-in replacement for `open_terminal` that answers from a string.
    The terminal used by the last call is exposed as `opener.terminal`.
    """

    def factory(answers: str):
        @contextmanager
        def opener(device: str = "/dev/tty") -> Iterator[FakeTerminal]:
            opener.terminal = FakeTerminal(answers)
            yield opener.terminal

        opener.terminal = None
        return opener

    return factory
