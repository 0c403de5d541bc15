"""
Pytest configuration and fixtures.

This file is automatically loaded by pytest and provides
shared fixtures for all tests.
"""

import pytest

from pmr.config import get_settings
from pmr.rating.adjuster import PlayerState


@pytest.fixture
def lowest_answers():
    """The lowest tier on every onboarding question."""
    return {
        "q1": "debutant",
        "q2": "moins-1an",
        "q3": "loisir",
        "q4": "1",
        "q5": "1",
    }


@pytest.fixture
def intermediate_answers():
    """A typical regular club player."""
    return {
        "q1": "intermediaire",
        "q2": "3-6ans",
        "q3": "debut-competition",
        "q4": "3",
        "q5": "3",
    }


@pytest.fixture
def team1():
    """Two mid-level players with average reliability."""
    return [
        PlayerState(id="p1", display_name="Joueur A", rating=4.5, reliability=50),
        PlayerState(id="p2", display_name="Joueur B", rating=5.0, reliability=50),
    ]


@pytest.fixture
def team2():
    """Two mid-level players with average reliability."""
    return [
        PlayerState(id="p3", display_name="Joueur C", rating=4.8, reliability=50),
        PlayerState(id="p4", display_name="Joueur D", rating=5.2, reliability=50),
    ]


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """
    Reset cached settings around each test.

    Tests that set PMR_* environment variables would otherwise leak their
    settings into later tests.
    """
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
