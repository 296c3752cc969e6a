"""
Shared pytest fixtures for factedit tests.

Facts are built in memory; store tests get a SQLite file under tmp_path.
"""

from pathlib import Path

import pytest

from factedit.fact_store import FactStore
from factedit.tags import TagUniverse
from factedit.types import Fact, Field


@pytest.fixture
def fact() -> Fact:
    """A two-field fact tagged with two tags."""
    return Fact(
        id="fact1",
        fields=[
            Field(name="Front", value="Paris", ordinal=0),
            Field(name="Back", value="Capital of France", ordinal=1),
        ],
        tags="math, history",
    )


@pytest.fixture
def universe() -> TagUniverse:
    """A loaded universe: [sentinel, geography, history, math]."""
    u = TagUniverse()
    u.load(["geography", "history", "math"])
    return u


@pytest.fixture
def store(tmp_path: Path):
    """A FactStore on a fresh database, seeded with three facts."""
    s = FactStore(tmp_path / "facts.db")
    s.add([("Front", "Paris"), ("Back", "France")], tags="geography, capitals", id="paris")
    s.add([("Front", "2+2"), ("Back", "4")], tags="math", id="sum")
    s.add([("Front", "1066"), ("Back", "Hastings")], tags="history, Battles", id="hastings")
    yield s
    s.close()
