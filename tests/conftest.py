"""Pytest configuration and fixtures."""

import logging

import pytest

from alleq.config import reset_config


@pytest.fixture(autouse=True)
def fresh_config():
    """Resolve the alleq config again for every test."""
    reset_config()
    yield
    reset_config()


@pytest.fixture(autouse=True)
def cleanup_loggers():
    """Strip handlers the CLI attaches to alleq loggers between tests."""
    yield

    for name in list(logging.Logger.manager.loggerDict.keys()):
        if name.startswith("alleq"):
            logger = logging.getLogger(name)
            logger.handlers.clear()
            logger.setLevel(logging.NOTSET)


class Counted:
    """Value whose equality counts how often each operand took part in it."""

    def __init__(self, inner):
        self.inner = inner
        self.compared = 0

    def __eq__(self, other):
        self.compared += 1
        other.compared += 1
        return self.inner == other.inner

    __hash__ = None

    def __repr__(self):
        return f"Counted({self.inner!r})"


@pytest.fixture
def recorder():
    """Return (record, evaluated): record(v) yields v and logs the evaluation."""
    evaluated = []

    def record(value):
        evaluated.append(value)
        return value

    return record, evaluated
