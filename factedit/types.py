"""
Data types for fact editing.

A Fact is the unit of content that cards are generated from. It owns an
ordered list of Fields and a single free-form tag string.
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional


# Canonical separator used when joining tags back into a tag string
TAG_SEPARATOR = ", "

# Character that splits tokens when parsing a tag string
_TAG_DELIMITER = ","


@dataclass
class Field:
    """One named text value within a Fact."""
    name: str
    value: str = ""
    ordinal: int = 0


@dataclass
class Fact:
    """
    A record with ordered fields and a tag string.

    Field membership and order are fixed once an edit session is opened.
    """
    id: str
    fields: list[Field] = field(default_factory=list)
    tags: str = ""

    def get_field(self, name: str) -> Optional[Field]:
        """Look up a field by display name."""
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def __str__(self) -> str:
        names = ", ".join(f.name for f in self.fields)
        return f"Fact({self.id}: [{names}] tags={self.tags!r})"


def parse_tags(text: str) -> list[str]:
    """Split a tag string into tokens.

    Tokens are separated by commas and trimmed; empty tokens and repeats
    are dropped. Order of first occurrence is kept.
    """
    if not text:
        return []
    tokens: list[str] = []
    seen: set[str] = set()
    for raw in text.split(_TAG_DELIMITER):
        token = raw.strip()
        if token and token not in seen:
            seen.add(token)
            tokens.append(token)
    return tokens


def join_tags(tags: Iterable[str]) -> str:
    """Join tokens into the canonical tag string."""
    return TAG_SEPARATOR.join(tags)


def validate_new_tag(text: str) -> Optional[str]:
    """Return the trimmed tag, or None if it can't be a tag.

    Empty and whitespace-only input is rejected, as is anything containing
    the delimiter (it would split into several tags on the next parse).
    """
    if text is None:
        return None
    tag = text.strip()
    if not tag or _TAG_DELIMITER in tag:
        return None
    return tag
