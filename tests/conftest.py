"""Shared pytest fixtures for LLM Brand Checker tests."""

import logging

import pytest

from llm_brand_checker.config.constants import (
    DEFAULT_API_KEY_ENV,
    MODEL_ENV,
    TEMPERATURE_ENV,
)
from llm_brand_checker.utils.console import output_mode


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Make sure a developer's real Gemini settings never leak into tests."""
    for var in (DEFAULT_API_KEY_ENV, MODEL_ENV, TEMPERATURE_ENV):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture(autouse=True)
def restore_logging_and_output():
    """Undo setup_logging() and CLI output flags after each test."""
    root_logger = logging.getLogger()
    handlers = root_logger.handlers[:]
    level = root_logger.level

    yield

    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)
    output_mode.format = "text"
    output_mode.quiet = False
    output_mode._json_buffer.clear()
