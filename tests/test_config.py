"""
Tests for environment configuration.
"""

import pytest
import logging

from poseval.config import (
    EvaluatorConfig, get_config, reset_config, DEFAULT_MAX_DEPTH,
)


@pytest.fixture(autouse=True)
def clean_config():
    reset_config()
    yield
    reset_config()


class TestEvaluatorConfig:
    """Test config construction and validation."""

    def test_defaults(self):
        config = EvaluatorConfig()
        assert config.max_depth == DEFAULT_MAX_DEPTH == 8
        assert config.log_level == "WARNING"
        assert config.logging_level == logging.WARNING

    def test_from_env(self):
        config = EvaluatorConfig.from_env({"POSEVAL_MAX_DEPTH": "3", "POSEVAL_LOG_LEVEL": "debug"})
        assert config.max_depth == 3
        assert config.log_level == "DEBUG"
        assert config.logging_level == logging.DEBUG

    def test_from_empty_env(self):
        assert EvaluatorConfig.from_env({}) == EvaluatorConfig()

    def test_invalid_depth(self):
        with pytest.raises(ValueError, match="POSEVAL_MAX_DEPTH"):
            EvaluatorConfig.from_env({"POSEVAL_MAX_DEPTH": "deep"})
        with pytest.raises(ValueError):
            EvaluatorConfig(max_depth=-1)

    def test_invalid_log_level(self):
        with pytest.raises(ValueError, match="log level"):
            EvaluatorConfig.from_env({"POSEVAL_LOG_LEVEL": "LOUD"})


class TestGetConfig:
    """Test the cached process-wide config."""

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("POSEVAL_MAX_DEPTH", "5")
        assert get_config().max_depth == 5

    def test_is_cached(self, monkeypatch):
        first = get_config()
        monkeypatch.setenv("POSEVAL_MAX_DEPTH", "2")
        assert get_config() is first
        reset_config()
        assert get_config().max_depth == 2
