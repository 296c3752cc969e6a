"""
Protocol definitions for the record store behind the editor.

The editing core only needs three things from storage: load a Fact, list
every tag in use, and save a Fact after a modifying commit.
"""

from typing import Optional, Protocol, runtime_checkable

from .types import Fact


@runtime_checkable
class FactStoreProtocol(Protocol):
    """
    Record store interface.

    Implemented by:
    - FactStore (local SQLite)
    """

    def get(self, id: str) -> Optional[Fact]: ...

    def all_tags(self) -> list[str]: ...

    def save(self, fact: Fact) -> None: ...
