"""
Dirty tracking for a single field.

Edits land in a working value. The underlying Field is only written when
reconcile() runs, so nothing leaks into the Fact before commit.
"""

import logging

from .types import Field

logger = logging.getLogger(__name__)


class FieldEditSession:
    """Working copy of one Field's text with change detection."""

    def __init__(self, field: Field):
        self._field = field
        self._original = field.value
        self.value = field.value

    @classmethod
    def open(cls, field: Field) -> "FieldEditSession":
        """Start editing a field, using its current value as the baseline."""
        return cls(field)

    @property
    def name(self) -> str:
        """Display name of the field (used as the label)."""
        return self._field.name

    @property
    def original(self) -> str:
        return self._original

    @property
    def changed(self) -> bool:
        """True if the working value differs from the baseline."""
        return self.value != self._original

    def reconcile(self) -> bool:
        """
        Write the working value back if it differs from the field.

        Returns:
            True if the field was written, False if it already matched.
            Repeat calls return False since the field now holds the value.
        """
        if self._field.value == self.value:
            return False
        logger.debug("Field %r changed (%d -> %d chars)",
                     self._field.name, len(self._field.value), len(self.value))
        self._field.value = self.value
        return True

    def __repr__(self) -> str:
        return f"FieldEditSession({self.name!r}, changed={self.changed})"
