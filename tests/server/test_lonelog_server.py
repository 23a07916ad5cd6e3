from __future__ import annotations

import logging

import pytest

from mcp_lonelog_server.server import lonelog_server


def test_configure_logging_level_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[dict] = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))

    monkeypatch.setenv(lonelog_server.LOG_LEVEL_ENV, "debug")
    lonelog_server._configure_logging()
    monkeypatch.setenv(lonelog_server.LOG_LEVEL_ENV, "chatty")
    lonelog_server._configure_logging()

    assert [c["level"] for c in calls] == [logging.DEBUG, logging.INFO]
    assert calls[0]["format"] == "%(asctime)s %(levelname)s %(name)s: %(message)s"
    assert lonelog_server._configure_logging.__doc__
