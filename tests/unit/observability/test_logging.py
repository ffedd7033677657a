"""Unit tests for structured logging helpers."""

from __future__ import annotations

import asyncio
import json
import logging

import pytest
import structlog

from sqrepo import Repository
from sqrepo.observability.logging import JsonLoggerFactory, get_logger
from sqrepo.testing import InMemoryStoreModel


class _Repo(Repository[dict]):
    async def find_by_name(self, name): ...


@pytest.fixture(autouse=True)
def _reset_structlog():
    yield
    structlog.reset_defaults()
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(logging.WARNING)


class TestGetLogger:
    def test_returns_bindable_logger(self) -> None:
        logger = get_logger("sqrepo.test", component="repo")
        assert hasattr(logger, "info")
        assert hasattr(logger, "bind")

    def test_without_initial_values(self) -> None:
        assert get_logger("sqrepo.test") is not None


class TestJsonLoggerFactory:
    def test_configure_sets_level_and_handler(self) -> None:
        JsonLoggerFactory.configure(level=logging.DEBUG)
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1

    def test_emits_json(self, capsys: pytest.CaptureFixture[str]) -> None:
        JsonLoggerFactory.configure(level=logging.INFO)
        get_logger("sqrepo.test").info("hello", answer=42)
        line = capsys.readouterr().err.strip().splitlines()[-1]
        payload = json.loads(line)
        assert payload["event"] == "hello"
        assert payload["answer"] == 42
        assert payload["level"] == "info"


class TestRepositoryLogging:
    def test_named_query_events(self) -> None:
        with structlog.testing.capture_logs() as logs:
            repo = _Repo(InMemoryStoreModel())
            asyncio.run(repo.find_by_name("Ann"))
        events = [entry["event"] for entry in logs]
        assert "named_query.registered" in events
        assert "named_query.executed" in events

    def test_save_event_has_no_values(self) -> None:
        with structlog.testing.capture_logs() as logs:
            repo = _Repo(InMemoryStoreModel())
            asyncio.run(repo.save({"name": "secret"}))
        saved = next(entry for entry in logs if entry["event"] == "repository.saved")
        assert saved["created"] is True
        assert "secret" not in json.dumps(saved, default=str)
