"""
Shared fixtures for chartsense tests.

Row builders produce deterministic datasets whose expected scores are
worked out by hand in the tests that use them.
"""

import logging

import pytest

from chartsense.core.logging_config import ROOT_LOGGER_NAME
from chartsense.profiler.column_stats import describe_rows
from chartsense.profiler.patterns import PatternLibrary

REGIONS = ["North", "South", "East", "West"]


@pytest.fixture
def fresh_patterns():
    """Reset the pattern library singleton around a test."""
    PatternLibrary.reset()
    yield
    PatternLibrary.reset()


@pytest.fixture(autouse=True)
def restore_logging():
    """Undo setup_logging() side effects after each test."""
    yield
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def sales_rows():
    """
    1000 rows: sequential id, non-sequential decimal revenue, uniform region.

    revenue = 10.5 + 1.5 * ((i * 617) % 1000) is a permutation of
    10.5 .. 1509.0, so every value is distinct and the order is not ascending.
    """
    return [
        {
            "id": i + 1,
            "revenue": 10.5 + 1.5 * ((i * 617) % 1000),
            "region": REGIONS[i % 4],
        }
        for i in range(1000)
    ]


@pytest.fixture
def sales_dataset(sales_rows):
    return describe_rows(sales_rows, file_name="sales.csv")


def make_rating_rows(product_count, row_count=200):
    return [
        {
            "rating": i % 5 + 1,
            "product": f"Product {chr(65 + i % product_count)}",
        }
        for i in range(row_count)
    ]


@pytest.fixture
def rating_rows():
    """200 rows: 1-5 rating and 15 distinct products."""
    return make_rating_rows(15)


@pytest.fixture
def rating_rows_factory():
    return make_rating_rows


@pytest.fixture
def numeric_rows():
    """30 rows of two varying numeric columns and one constant column."""
    return [
        {
            "x": float((i * 7) % 30) + 0.5,
            "y": float((i * 11) % 30) * 2 + 1,
            "flat": 7,
        }
        for i in range(30)
    ]
