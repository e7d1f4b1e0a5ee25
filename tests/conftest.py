"""Shared fixtures for the product scraper test suite."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import pytest

# Ensure the project modules are importable from tests/
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))


class FakeElement:
    """Stand-in for a Playwright ``ElementHandle``."""

    def __init__(self, on_click=None, *, fail: Exception | None = None):
        self.clicks = 0
        self._on_click = on_click
        self._fail = fail

    async def click(self) -> None:
        if self._fail is not None:
            raise self._fail
        self.clicks += 1
        if self._on_click is not None:
            self._on_click()


class FakePage:
    """Canned-response page implementing the capabilities the engine uses.

    ``responses`` maps ``(script, arg)`` (or just ``script`` for every
    argument) to a return value.  Exception instances are raised instead
    of returned.  Unmapped evaluations return ``""``.
    """

    def __init__(
        self,
        responses: dict[Any, Any] | None = None,
        *,
        elements: dict[str, FakeElement] | None = None,
        closed: bool = False,
    ):
        self.responses: dict[Any, Any] = dict(responses or {})
        self.elements = dict(elements or {})
        self.closed = closed
        self.calls: list[tuple[str, Any]] = []
        self.waits: list[tuple[Any, int]] = []

    def is_closed(self) -> bool:
        return self.closed

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        self.calls.append((script, arg))
        if (script, arg) in self.responses:
            value = self.responses[(script, arg)]
        else:
            value = self.responses.get(script, "")
        if isinstance(value, BaseException):
            raise value
        return value

    async def query_selector(self, selector: str) -> FakeElement | None:
        return self.elements.get(selector)

    async def wait_for_function(self, script: str, *, arg: Any = None, timeout: int | None = None):
        self.waits.append((arg, timeout))
        return True

    def evaluated_args(self, script: str) -> list[Any]:
        return [arg for s, arg in self.calls if s == script]


@pytest.fixture
def make_page():
    """Factory for ``FakePage`` instances."""

    def _make(responses=None, **kwargs) -> FakePage:
        return FakePage(responses, **kwargs)

    return _make


@pytest.fixture
def make_element():
    def _make(on_click=None, **kwargs) -> FakeElement:
        return FakeElement(on_click, **kwargs)

    return _make
