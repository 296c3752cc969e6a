"""
Tag universe and tag selection.

The universe is every distinct tag known to the record store, with an
"add new tag" sentinel pinned at index 0. A selection is a checked vector
aligned with a snapshot of the universe, derived from a tag string.
"""

import logging
import threading
from typing import Iterable, Optional

from .types import join_tags, parse_tags, validate_new_tag

logger = logging.getLogger(__name__)

DEFAULT_NEW_TAG_LABEL = "Add new tag"

SENTINEL_INDEX = 0


class TagUniverse:
    """
    Ordered, deduplicated tags with the sentinel entry first.

    Populated once per editing session by load(); later loads are no-ops so
    tags appended in the meantime survive. Mutations and snapshots share a
    lock, so it can be read from one thread while another appends.
    """

    def __init__(self, new_tag_label: str = DEFAULT_NEW_TAG_LABEL):
        self._label = new_tag_label
        self._tags: list[str] = []
        self._loaded = False
        self._lock = threading.Lock()

    @property
    def sentinel(self) -> str:
        """Label of the "add new tag" entry."""
        return self._label

    @property
    def loaded(self) -> bool:
        return self._loaded

    def load(self, all_known_tags: Iterable[str]) -> bool:
        """
        Populate the universe from the record store's tag list.

        Args:
            all_known_tags: Distinct tags in store order

        Returns:
            True if this call populated the universe, False if it was
            already loaded.
        """
        with self._lock:
            if self._loaded:
                logger.debug("Tag universe already loaded, keeping %d tags", len(self._tags))
                return False
            seen = set(self._tags)
            for tag in all_known_tags:
                if tag and tag not in seen:
                    seen.add(tag)
                    self._tags.append(tag)
            self._loaded = True
            logger.info("Loaded tag universe: %d tags", len(self._tags))
            return True

    def append(self, tag: str) -> bool:
        """
        Insert a new tag right after the sentinel.

        Rejects empty or whitespace-only input, anything with a comma, and
        tags already present. Rejection leaves the universe untouched.

        Returns:
            True if the tag was inserted
        """
        clean = validate_new_tag(tag)
        if clean is None:
            logger.debug("Rejected new tag %r", tag)
            return False
        with self._lock:
            if clean in self._tags:
                logger.debug("Tag %r already known, not appending", clean)
                return False
            self._tags.insert(0, clean)
        logger.info("Added new tag %r", clean)
        return True

    def entries(self) -> tuple[str, ...]:
        """Snapshot including the sentinel at index 0."""
        with self._lock:
            return (self._label, *self._tags)

    @property
    def tags(self) -> list[str]:
        """Snapshot of the real tags (sentinel excluded)."""
        with self._lock:
            return list(self._tags)

    def __contains__(self, tag: object) -> bool:
        with self._lock:
            return tag in self._tags

    def __len__(self) -> int:
        with self._lock:
            return len(self._tags) + 1


class TagSelectionModel:
    """
    Which universe entries are selected for one Fact.

    Built by derive() against a universe snapshot. The snapshot is fixed for
    the model's lifetime; after the universe changes, derive a new model.
    """

    def __init__(self, entries: tuple[str, ...], checked: list[bool]):
        self._entries = entries
        self._checked = checked

    @classmethod
    def derive(cls, tag_string: str, universe: TagUniverse) -> "TagSelectionModel":
        """
        Compute the checked vector for a tag string.

        Tokens not present in the universe are dropped: the selection can't
        represent them.
        """
        entries = universe.entries()
        wanted = set(parse_tags(tag_string))
        checked = [False] + [tag in wanted for tag in entries[1:]]
        dropped = wanted.difference(entries[1:])
        if dropped:
            logger.debug("Dropped tags not in universe: %s", sorted(dropped))
        return cls(entries, checked)

    @property
    def entries(self) -> tuple[str, ...]:
        return self._entries

    @property
    def checked(self) -> list[bool]:
        """Checked state aligned with entries; index 0 is always False."""
        return list(self._checked)

    @staticmethod
    def is_sentinel(index: int) -> bool:
        return index == SENTINEL_INDEX

    def toggle(self, index: int) -> bool:
        """
        Flip selection of the tag at index.

        The sentinel is not selectable; toggling it is ignored and returns
        False. Routing it to new-tag creation is up to the caller.

        Returns:
            The new checked state

        Raises:
            IndexError: index is outside the universe snapshot
        """
        if not 0 <= index < len(self._entries):
            raise IndexError(f"Tag index {index} out of range (0-{len(self._entries) - 1})")
        if self.is_sentinel(index):
            logger.debug("Ignoring toggle of the new-tag entry")
            return False
        self._checked[index] = not self._checked[index]
        logger.info("%s tag: %s",
                    "checked" if self._checked[index] else "unchecked",
                    self._entries[index])
        return self._checked[index]

    def index_of(self, tag: str) -> Optional[int]:
        """Position of a real tag in the snapshot, or None."""
        for i, entry in enumerate(self._entries[1:], start=1):
            if entry == tag:
                return i
        return None

    def selected(self) -> list[str]:
        """Selected tags in universe order."""
        return [tag for tag, on in zip(self._entries[1:], self._checked[1:]) if on]

    def serialize(self) -> str:
        """Canonical tag string for the selection ("" when nothing is selected)."""
        return join_tags(self.selected())

    def __repr__(self) -> str:
        return f"TagSelectionModel({self.selected()!r})"
