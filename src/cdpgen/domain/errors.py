"""Compilation error taxonomy.

Every error is fatal. The compiler halts at the first one and reports the
offending ``Domain.Declaration.field`` path; no partial output is produced.
"""

from __future__ import annotations


class CdpgenError(Exception):
    """Base class for all schema compilation failures.

    Attributes:
        code: Stable machine-readable error code (surfaced in ServiceError).
        path: Dotted location of the failure, e.g. ``"DOM.Node.children"``.
    """

    code = "CDPGEN_ERROR"

    def __init__(self, message: str, *, path: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path

    def __str__(self) -> str:
        if self.path:
            return f"{self.path}: {self.message}"
        return self.message


class SchemaFetchError(CdpgenError):
    """The schema document could not be acquired (network or disk)."""

    code = "SCHEMA_FETCH"


class SchemaParseError(CdpgenError):
    """The schema document is not valid JSON or does not match the model."""

    code = "SCHEMA_PARSE"


class SchemaReferenceError(CdpgenError):
    """A ``$ref`` names a type that no domain declares."""

    code = "SCHEMA_REFERENCE"


class SchemaShapeError(CdpgenError):
    """A type node lacks the shape its discriminator requires."""

    code = "SCHEMA_SHAPE"


class OutputWriteError(CdpgenError):
    """The generated module could not be written."""

    code = "OUTPUT_WRITE"
