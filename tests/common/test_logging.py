from __future__ import annotations

import logging

import pytest

from modelmerge.common.logging import configure_logging


def test_configure_logging_uses_terse_format(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[dict[str, object]] = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))

    configure_logging(level=logging.DEBUG, force=True)

    (kwargs,) = calls
    assert kwargs["level"] == logging.DEBUG
    assert kwargs["force"] is True
    assert kwargs["format"] == "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def test_configure_logging_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[dict[str, object]] = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))

    configure_logging()

    assert calls[0]["level"] == logging.INFO
    assert calls[0]["force"] is False
