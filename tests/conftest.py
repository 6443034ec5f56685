"""
Shared fixtures.
"""

from __future__ import annotations

import pytest

from tests.helpers import StubClassifier


@pytest.fixture()
def classifier() -> StubClassifier:
    return StubClassifier({
        "Senegal": "Africa",
        "Algeria": "Africa",
        "Russian Federation": "Europe",
        "China": "Asia",
        "Colombia": "South America",
    })
