"""
Fact editing

Edit the text fields and tag string of a stored fact, with change tracking
so that nothing is written unless something actually changed.

Quick Start:
    from factedit import FactEditSession, FactStore, TagUniverse

    store = FactStore(Path("facts.db"))
    fact = store.get("abc123")
    session = FactEditSession(fact, TagUniverse())
    session.set_field("Front", "paris")
    session.open_tags(store.all_tags())
    session.add_new_tag("capitals")
    session.confirm_tags()
    if session.commit():
        store.save(fact)

CLI Usage:
    factedit add -f Front=Paris -f Back=France -t geography
    factedit edit <id> -f Front=paris -n capitals
    factedit tags

Environment Variables:
    FACTEDIT_STORE_PATH  - Override default store location (~/.factedit)
    FACTEDIT_VERBOSE     - Set to 1 for debug logging
"""

from .decision import EditOutcome, evaluate, outcome
from .errors import FactEditError, FactNotFoundError, ReadOnlySessionError, SessionClosedError
from .fact_store import FactStore
from .fields import FieldEditSession
from .protocol import FactStoreProtocol
from .session import FactEditSession
from .tags import DEFAULT_NEW_TAG_LABEL, TagSelectionModel, TagUniverse
from .types import TAG_SEPARATOR, Fact, Field, join_tags, parse_tags

__version__ = "0.1.0"
__all__ = [
    "DEFAULT_NEW_TAG_LABEL",
    "EditOutcome",
    "Fact",
    "FactEditError",
    "FactEditSession",
    "FactNotFoundError",
    "FactStore",
    "FactStoreProtocol",
    "Field",
    "FieldEditSession",
    "ReadOnlySessionError",
    "SessionClosedError",
    "TAG_SEPARATOR",
    "TagSelectionModel",
    "TagUniverse",
    "evaluate",
    "join_tags",
    "outcome",
    "parse_tags",
]
