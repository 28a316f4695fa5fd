"""Tests for logging utilities."""

import logging
from io import StringIO

import numpy as np

from krylovtr.logging import (
    configure_logging,
    get_logger,
    set_log_level,
)
from krylovtr.manifolds import Euclidean
from krylovtr.trs import Problem, TRSInput, trs_lanczos


def test_get_logger_returns_logger():
    """Test that get_logger returns a logger instance."""
    logger = get_logger("test_module")
    assert isinstance(logger, logging.Logger)
    assert logger.name == "krylovtr.test_module"


def test_get_logger_keeps_package_names():
    assert get_logger("krylovtr.trs.lanczos").name == "krylovtr.trs.lanczos"
    assert get_logger().name == "krylovtr"


def test_get_logger_caching():
    """Test that get_logger caches loggers."""
    assert get_logger("test_module") is get_logger("test_module")


def test_get_logger_different_modules():
    """Test that different modules get different loggers."""
    logger1 = get_logger("module1")
    logger2 = get_logger("module2")
    assert logger1 is not logger2
    assert logger1.name != logger2.name


def test_set_log_level_string():
    """Test that set_log_level accepts string levels."""
    logger = get_logger("test_module")
    try:
        set_log_level("DEBUG")
        assert logger.level == logging.DEBUG
        set_log_level("ERROR")
        assert logger.level == logging.ERROR
    finally:
        set_log_level(logging.WARNING)


def test_configure_logging():
    """Test configure_logging function."""
    logger = get_logger("test_module")
    stream = StringIO()
    configure_logging(level=logging.DEBUG, stream=stream)
    try:
        logger.debug("Debug message")
    finally:
        configure_logging(level=logging.WARNING)
    output = stream.getvalue()
    assert "Debug message" in output
    assert "krylovtr.test_module" in output


def test_logger_does_not_propagate():
    """Test that loggers don't propagate to root logger."""
    assert get_logger("test_module").propagate is False


def test_solver_logs_phase_switch_and_iterations():
    """Debug verbosity above 2 reports every inner iteration."""
    get_logger("krylovtr.trs.lanczos")
    stream = StringIO()
    configure_logging(level=logging.DEBUG, stream=stream)
    try:
        problem = Problem(manifold=Euclidean(2), hess=lambda x, d: d)
        trs_lanczos(
            problem,
            TRSInput(np.zeros(2), np.array([1.0, 0.0]), 0.5),
            {"debug": 3},
        )
    finally:
        configure_logging(level=logging.WARNING)
    output = stream.getvalue()
    assert "inner 1: (r,r)" in output
    assert "switching to the boundary phase" in output
