"""
Cascading Test Configuration and Fixtures
"""

import pytest
from typing import Any, List, Tuple

from cascading.core.engine import CascadeEngine
from cascading.fixtures import (
    COMPREHENSIVE_PRODUCTS,
    PRODUCT_DEPENDENCIES,
    SAMPLE_PRODUCTS,
)


class NotificationRecorder:
    """Observer that keeps (field, value, view) for every notification."""

    def __init__(self):
        self.calls: List[Tuple[str, Any, Any]] = []

    def __call__(self, field_name, value, view):
        self.calls.append((field_name, value, view))

    @property
    def pairs(self) -> List[Tuple[str, Any]]:
        return [(f, v) for f, v, _ in self.calls]

    def clear(self) -> None:
        self.calls.clear()


@pytest.fixture
def products():
    """Copy of the comprehensive catalogue."""
    return [dict(p) for p in COMPREHENSIVE_PRODUCTS]


@pytest.fixture
def product_engine(products):
    """Engine over the comprehensive catalogue with the product chain."""
    return CascadeEngine(products, PRODUCT_DEPENDENCIES)


@pytest.fixture
def sample_engine():
    """Engine over the five-record sample catalogue."""
    return CascadeEngine([dict(p) for p in SAMPLE_PRODUCTS], PRODUCT_DEPENDENCIES)


@pytest.fixture
def recorder():
    return NotificationRecorder()
