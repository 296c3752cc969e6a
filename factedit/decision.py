"""
Commit-or-discard decision for an edit session.
"""

from enum import Enum
from typing import Iterable


class EditOutcome(str, Enum):
    """Result code reported to whoever opened the editor."""
    COMMIT = "commit"
    CANCEL = "cancel"


def evaluate(field_results: Iterable[bool], original_tags: str, new_tags: str) -> bool:
    """
    Decide whether an edit modified the Fact.

    Tag strings are compared as text, not as sets: "math, history" and
    "math,history" count as a modification.
    """
    if any(field_results):
        return True
    return new_tags != original_tags


def outcome(modified: bool) -> EditOutcome:
    """Map the decision to the caller's result code."""
    return EditOutcome.COMMIT if modified else EditOutcome.CANCEL
