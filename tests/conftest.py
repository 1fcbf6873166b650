"""
Shared example temporal networks for the test suite.
"""

import logging

import pytest

from tempnet.timeseries.edge_log import TemporalEdgeLog
from tempnet.common.logging_config import ROOT_LOGGER_NAME


def build_reference_network(**options) -> TemporalEdgeLog:
    """
    Reference network with 22 edges on 21 time steps.

    Node e mostly connects c to f and a to g. The edge (f, e) at step 11
    continues the two-path e -> f -> e, the edge (e, b) at step 13 belongs to
    no two-path, and step 14 holds two edges entering e.
    """
    log = TemporalEdgeLog(**options)
    edges = [
        (1, "c", "e"), (2, "e", "f"),
        (3, "a", "e"), (4, "e", "g"),
        (5, "c", "e"), (6, "e", "f"),
        (7, "a", "e"), (8, "e", "g"),
        (9, "c", "e"), (10, "e", "f"),
        (11, "f", "e"), (12, "e", "b"),
        (13, "e", "b"),
        (14, "g", "e"), (14, "c", "e"), (15, "e", "f"),
        (16, "b", "e"), (17, "e", "g"),
        (18, "c", "e"), (19, "e", "f"),
        (20, "c", "e"), (21, "e", "f"),
    ]
    for time, source, target in edges:
        log.add_edge(time, source, target)
    return log


def build_fan_network(**options) -> TemporalEdgeLog:
    """a -> b at 1; b -> c and d -> c at 2; c -> a, c -> b and c -> d at 3."""
    log = TemporalEdgeLog(**options)
    log.add_edge(1, "a", "b")
    log.add_edge(2, "b", "c")
    log.add_edge(2, "d", "c")
    log.add_edge(3, "c", "a")
    log.add_edge(3, "c", "b")
    log.add_edge(3, "c", "d")
    return log


def build_gapped_network(**options) -> TemporalEdgeLog:
    """Six edges on the time steps 1, 2, 7, 8, 9 and 10."""
    log = TemporalEdgeLog(**options)
    log.add_edge(1, "a", "b")
    log.add_edge(2, "a", "c")
    log.add_edge(7, "c", "e")
    log.add_edge(8, "c", "g")
    log.add_edge(9, "g", "f")
    log.add_edge(10, "f", "h")
    return log


def build_biased_network() -> TemporalEdgeLog:
    """x connects a to b three times and c to d once."""
    log = TemporalEdgeLog()
    time = 1
    for source, target in [("a", "b"), ("a", "b"), ("a", "b"), ("c", "d")]:
        log.add_edge(time, source, "x")
        log.add_edge(time + 1, "x", target)
        time += 2
    return log


@pytest.fixture
def reference_network() -> TemporalEdgeLog:
    return build_reference_network()


@pytest.fixture
def fan_network() -> TemporalEdgeLog:
    return build_fan_network()


@pytest.fixture
def gapped_network() -> TemporalEdgeLog:
    return build_gapped_network()


@pytest.fixture
def biased_network() -> TemporalEdgeLog:
    return build_biased_network()


@pytest.fixture(autouse=True)
def reset_tempnet_logger():
    """Undo any logging configuration a test installs on the tempnet root logger."""
    yield
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(root_logger.handlers):
        handler.close()
    root_logger.handlers.clear()
    root_logger.setLevel(logging.NOTSET)
    root_logger.propagate = True
