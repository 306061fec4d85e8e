"""Exception types raised while generating a script."""

from __future__ import annotations


class BashTestMdError(Exception):
    """Base exception for bashtestmd.

    Attributes:
        line: 1-based document line of the offending block, 0 when unknown.
    """

    def __init__(self, message: str, *, line: int = 0) -> None:
        self.line = line
        self.message = message
        super().__init__(f"line {line}: {message}" if line else message)


class MalformedDocumentError(BashTestMdError):
    """Raised when a fenced block is opened but never closed."""


class TagError(BashTestMdError):
    """Base exception for invalid block headers."""


class UnknownTagError(TagError):
    """Raised for a modifier token outside the recognized set."""

    def __init__(self, name: str, *, line: int = 0) -> None:
        self.name = name
        super().__init__(f"unknown tag {name!r}", line=line)


class MissingTagValueError(TagError):
    """Raised when a value-bearing tag has no ``="..."`` payload."""

    def __init__(self, name: str, *, line: int = 0) -> None:
        self.name = name
        super().__init__(f"tag {name!r} requires a value, e.g. {name}=\"...\"", line=line)


class InvalidTagValueError(TagError):
    """Raised when a tag value cannot be used."""

    def __init__(self, name: str, value: str, reason: str, *, line: int = 0) -> None:
        self.name = name
        self.value = value
        super().__init__(f"invalid value {value!r} for tag {name!r}: {reason}", line=line)


class ConflictingTagsError(TagError):
    """Raised when mutually exclusive tags are declared on one block."""

    def __init__(self, first: str, second: str, *, line: int = 0) -> None:
        self.tags = (first, second)
        super().__init__(f"tags {first!r} and {second!r} are mutually exclusive", line=line)
