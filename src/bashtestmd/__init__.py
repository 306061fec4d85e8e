"""bashtestmd - turn tagged Markdown shell snippets into a CI script."""

from .assembler import assemble, generate
from .errors import (
    BashTestMdError,
    ConflictingTagsError,
    InvalidTagValueError,
    MalformedDocumentError,
    MissingTagValueError,
    UnknownTagError,
)
from .types import CodeBlock, Command, SynthesisOptions, TagSet

__version__ = "0.1.0"

__all__ = [
    "BashTestMdError",
    "CodeBlock",
    "Command",
    "ConflictingTagsError",
    "InvalidTagValueError",
    "MalformedDocumentError",
    "MissingTagValueError",
    "SynthesisOptions",
    "TagSet",
    "UnknownTagError",
    "assemble",
    "generate",
]
