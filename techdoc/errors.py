"""Error taxonomy raised while decoding technology-detail payloads.

Every failure is terminal for the page being decoded: any error at any nesting
level aborts the whole decode and no partial tree is returned. Unknown block
and inline kinds are *not* errors (they decode to ``UnknownBlock`` and
``UnknownInline``); only structurally malformed input lands here.

Callers usually catch the base class:

>>> from techdoc import decode_technology_detail
>>> from techdoc.errors import DecodeError
>>> try:
...     decode_technology_detail(b"{not json")
... except DecodeError as exc:
...     type(exc).__name__
'MalformedInput'
"""

from __future__ import annotations


class DecodeError(ValueError):
    """Base class for every technology-detail decode failure.

    Attributes
    ----------
    path : str
        JSONPath-like location of the failure, rooted at ``$``.
    """

    def __init__(self, message: str, *, path: str = "$") -> None:
        super().__init__(message)
        self.path = path


class MalformedInput(DecodeError):
    """Raised when the input bytes are not a valid JSON document."""


class MissingField(DecodeError):
    """Raised when a structurally required field is absent."""

    def __init__(self, path: str) -> None:
        msg = f"Missing required field at {path}"
        super().__init__(msg, path=path)


class TypeMismatch(DecodeError):
    """Raised when a field's JSON type does not match the expected shape.

    Attributes
    ----------
    expected : str
        JSON type (or union of types) the schema requires.
    found : str
        JSON type actually present in the payload.
    """

    def __init__(self, path: str, expected: str, found: str) -> None:
        msg = f"Expected {expected} at {path}, found {found}"
        super().__init__(msg, path=path)
        self.expected = expected
        self.found = found


class UnknownTag(DecodeError):
    """Raised when a closed union receives a discriminator it does not define.

    Only the topic ``kind`` and fragment ``kind`` unions are closed. Block and
    inline content are forward compatible and never raise this error.
    """

    def __init__(self, field: str, value: str, *, path: str = "$") -> None:
        msg = f"Unknown {field} {value!r} at {path}"
        super().__init__(msg, path=path)
        self.field = field
        self.value = value


class NestingTooDeep(DecodeError):
    """Raised when nested content exceeds the configured depth guard.

    ``limit`` is ``None`` when the JSON parser itself ran out of stack before
    the content depth guard was reached.
    """

    def __init__(self, path: str, limit: int | None) -> None:
        if limit is None:
            msg = f"Payload nesting exceeds the parser limit at {path}"
        else:
            msg = f"Content nesting exceeds {limit} levels at {path}"
        super().__init__(msg, path=path)
        self.limit = limit


__all__ = [
    "DecodeError",
    "MalformedInput",
    "MissingField",
    "NestingTooDeep",
    "TypeMismatch",
    "UnknownTag",
]
