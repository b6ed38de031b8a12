"""
Pytest fixtures for idcollection tests.
"""

import pytest
from typing import List

from idcollection import Collection, Record, set_config


class Tag:
    """Minimal identified member that is not a Record."""

    def __init__(self, name: str):
        self.name = name

    def id(self):
        return self.name


@pytest.fixture(autouse=True)
def reset_config():
    """Start every test from the default settings."""
    set_config(None)
    yield
    set_config(None)


@pytest.fixture(autouse=True)
def restore_methods():
    """Undo extension methods registered on Collection itself."""
    saved = dict(Collection._methods)
    yield
    Collection._methods.clear()
    Collection._methods.update(saved)


@pytest.fixture
def sample_records() -> List[Record]:
    """Create sample book records."""
    return [
        Record("dune", {
            "title": "Dune",
            "genre": "SciFi",
            "year": 1965,
            "author": {"name": "Frank Herbert"},
            "tags": ["desert", "spice"],
        }),
        Record("emma", {
            "title": "Emma",
            "genre": "Classic",
            "year": 1815,
            "author": {"name": "Jane Austen"},
            "tags": ["romance"],
        }),
        Record("neuromancer", {
            "title": "Neuromancer",
            "genre": "scifi",
            "year": 1984,
            "author": {"name": "William Gibson"},
            "tags": ["cyberpunk"],
        }),
        Record("hyperion", {
            "title": "Hyperion",
            "genre": "SciFi",
            "year": 1989,
            "author": {"name": "Dan Simmons"},
            "tags": ["pilgrimage", "desert"],
        }),
        Record("persuasion", {
            "title": "Persuasion",
            "genre": "Classic",
            "year": 1817,
            "author": {"name": "Jane Austen"},
            "tags": ["romance"],
        }),
    ]


@pytest.fixture
def books(sample_records: List[Record]) -> Collection:
    """Collection of the sample records, keyed by id."""
    return Collection(sample_records)


@pytest.fixture
def tag():
    """Factory for identified non-Record members."""
    return Tag
