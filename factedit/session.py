"""
Edit session for one Fact.

Lifecycle: open -> edit fields and tags -> commit or discard.

Field edits go to FieldEditSessions and tag edits go to a working tag
string, so the Fact is untouched until commit(). The tag picker works on a
pending TagSelectionModel that is either confirmed into the working tag
string or cancelled.
"""

import logging
from typing import Iterable, Optional

from .decision import evaluate
from .errors import ReadOnlySessionError, SessionClosedError
from .fields import FieldEditSession
from .tags import TagSelectionModel, TagUniverse
from .types import Fact, join_tags, parse_tags, validate_new_tag

logger = logging.getLogger(__name__)


class FactEditSession:
    """
    Transient editing state for a single Fact.

    A read-only session still tracks edits but refuses to commit. Callers
    open one when a display transform is active, so transformed text can't
    be written back.
    """

    def __init__(
        self,
        fact: Fact,
        universe: Optional[TagUniverse] = None,
        *,
        read_only: bool = False,
    ):
        self._fact = fact
        self._universe = universe if universe is not None else TagUniverse()
        self._read_only = read_only
        self._fields = [FieldEditSession.open(f) for f in fact.fields]
        self._original_tags = fact.tags
        self._tags = fact.tags
        self._selection: Optional[TagSelectionModel] = None
        self._closed = False

    @property
    def fact(self) -> Fact:
        return self._fact

    @property
    def universe(self) -> TagUniverse:
        return self._universe

    @property
    def read_only(self) -> bool:
        return self._read_only

    @property
    def closed(self) -> bool:
        return self._closed

    # -------------------------------------------------------------------------
    # Fields
    # -------------------------------------------------------------------------

    @property
    def fields(self) -> list[FieldEditSession]:
        return list(self._fields)

    def field(self, name: str) -> FieldEditSession:
        """Look up a field session by display name.

        Raises:
            KeyError: no field with that name
        """
        for session in self._fields:
            if session.name == name:
                return session
        raise KeyError(name)

    def set_field(self, name: str, value: str) -> None:
        """Set a field's working value. The Fact is not written."""
        self.field(name).value = value

    # -------------------------------------------------------------------------
    # Tags
    # -------------------------------------------------------------------------

    @property
    def tags(self) -> str:
        """Working tag string."""
        return self._tags

    @property
    def selection(self) -> Optional[TagSelectionModel]:
        """Pending tag selection while the picker is open."""
        return self._selection

    def set_tags(self, text: str) -> None:
        """Replace the working tag string verbatim."""
        self._tags = text

    def open_tags(self, all_known_tags: Iterable[str] = ()) -> TagSelectionModel:
        """
        Open the tag picker.

        The universe is loaded from all_known_tags only the first time; tags
        added earlier in the session are kept on re-open.
        """
        self._universe.load(all_known_tags)
        self._selection = TagSelectionModel.derive(self._tags, self._universe)
        return self._selection

    def _require_selection(self) -> TagSelectionModel:
        if self._selection is None:
            self._selection = TagSelectionModel.derive(self._tags, self._universe)
        return self._selection

    def toggle_tag(self, index: int) -> bool:
        """Toggle a tag in the pending selection; the sentinel is ignored."""
        return self._require_selection().toggle(index)

    def add_new_tag(self, text: str) -> bool:
        """
        Create a tag and attach it to the fact.

        The tag goes into the working tag string right away, so cancelling
        the picker afterwards keeps it. It is also selected in the pending
        selection alongside any toggles made so far.

        Returns:
            False for empty or otherwise invalid input, leaving everything
            unchanged so the caller can prompt again.
        """
        tag = validate_new_tag(text)
        if tag is None:
            logger.debug("Ignoring empty new tag")
            return False
        selection = self._require_selection()
        selected = selection.selected()
        self._universe.append(tag)
        if tag not in selected:
            selected.append(tag)
        if tag not in parse_tags(self._tags):
            self._tags = join_tags([self._tags, tag]) if self._tags.strip() else tag
        self._selection = TagSelectionModel.derive(join_tags(selected), self._universe)
        return True

    def confirm_tags(self) -> str:
        """Write the pending selection into the working tag string."""
        selection = self._require_selection()
        self._tags = selection.serialize()
        self._selection = None
        return self._tags

    def cancel_tags(self) -> None:
        """Drop the pending selection."""
        self._selection = None

    # -------------------------------------------------------------------------
    # Commit / discard
    # -------------------------------------------------------------------------

    def commit(self) -> bool:
        """
        Reconcile all fields and the tag string into the Fact.

        Returns:
            True if anything was modified

        Raises:
            SessionClosedError: the session was already committed or discarded
            ReadOnlySessionError: the session was opened read only
        """
        if self._closed:
            raise SessionClosedError(f"Session for {self._fact.id} is closed")
        if self._read_only:
            raise ReadOnlySessionError("Session is read only; edits can't be saved")
        results = [session.reconcile() for session in self._fields]
        if self._fact.tags != self._tags:
            self._fact.tags = self._tags
        modified = evaluate(results, self._original_tags, self._tags)
        self._closed = True
        self._selection = None
        logger.info("Commit %s: %s", self._fact.id, "modified" if modified else "unchanged")
        return modified

    def discard(self) -> None:
        """End the session without writing anything."""
        self._selection = None
        self._closed = True
        logger.debug("Discarded edits to %s", self._fact.id)
