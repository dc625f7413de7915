"""Schema model: immutable pydantic representation of a protocol document.

Mirrors the DevTools protocol JSON layout::

    {"version": {"major": "1", "minor": "3"},
     "domains": [{"domain": "Target",
                  "types": [{"id": "TargetID", "type": "string"}],
                  "commands": [{"name": "attachToTarget",
                                "parameters": [{"name": "targetId", "$ref": "TargetID"}],
                                "returns": [{"name": "sessionId", "type": "string"}]}],
                  "events": [...]}]}

The model is built once per compilation and never mutated.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, ValidationError

from cdpgen.domain.errors import SchemaParseError


class TypeEnum(StrEnum):
    """Closed shape discriminator for a schema type node."""

    BOOLEAN = "boolean"
    INTEGER = "integer"
    NUMBER = "number"
    STRING = "string"
    ANY = "any"
    ARRAY = "array"
    OBJECT = "object"


class _SchemaNode(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class Items(_SchemaNode):
    """Array element shape: a ``$ref`` or a nested TypeElement-like shape."""

    ref: str | None = Field(default=None, alias="$ref")
    type: TypeEnum | None = None
    enum: tuple[str, ...] | None = None
    items: Items | None = None
    properties: tuple[Parameter, ...] | None = None


class Parameter(_SchemaNode):
    """A field of an object, command parameter/return list, or event."""

    name: str
    type: TypeEnum | None = None
    ref: str | None = Field(default=None, alias="$ref")
    optional: bool = False
    enum: tuple[str, ...] | None = None
    items: Items | None = None
    properties: tuple[Parameter, ...] | None = None
    description: str | None = None
    experimental: bool = False
    deprecated: bool = False


class TypeElement(_SchemaNode):
    """A named type declaration scoped to a domain."""

    id: str
    type: TypeEnum
    enum: tuple[str, ...] | None = None
    items: Items | None = None
    properties: tuple[Parameter, ...] | None = None
    description: str | None = None
    experimental: bool = False
    deprecated: bool = False


class Command(_SchemaNode):
    name: str
    parameters: tuple[Parameter, ...] | None = None
    returns: tuple[Parameter, ...] | None = None
    description: str | None = None
    experimental: bool = False
    deprecated: bool = False
    redirect: str | None = None


class Event(_SchemaNode):
    name: str
    parameters: tuple[Parameter, ...] | None = None
    description: str | None = None
    experimental: bool = False
    deprecated: bool = False


class Domain(_SchemaNode):
    """Named namespace owning types, commands and events."""

    domain: str
    description: str | None = None
    experimental: bool = False
    deprecated: bool = False
    dependencies: tuple[str, ...] | None = None
    types: tuple[TypeElement, ...] | None = None
    commands: tuple[Command, ...] = ()
    events: tuple[Event, ...] | None = None


class Version(_SchemaNode):
    major: str
    minor: str


class Protocol(_SchemaNode):
    """Root of the schema model: an ordered list of domains.

    Type lookup is served from an index keyed by ``(domain, id)`` built once
    at construction, so Refs resolve against the complete model regardless
    of the order in which domains are compiled.
    """

    version: Version | None = None
    domains: tuple[Domain, ...] = ()

    _index: dict[tuple[str, str], TypeElement] = PrivateAttr(default_factory=dict)

    def model_post_init(self, __context: object) -> None:
        index: dict[tuple[str, str], TypeElement] = {}
        for domain in self.domains:
            for element in domain.types or ():
                index[(domain.domain, element.id)] = element
        self._index = index

    def find_type(self, domain: str, type_id: str) -> TypeElement | None:
        """Return the TypeElement declared as *type_id* in *domain*, or None."""
        return self._index.get((domain, type_id))

    def get_domain(self, name: str) -> Domain | None:
        for domain in self.domains:
            if domain.domain == name:
                return domain
        return None

    @classmethod
    def merge(cls, protocols: list[Protocol]) -> Protocol:
        """Concatenate the domains of several documents into one Protocol.

        The first document carrying a version wins.
        """
        version = next((p.version for p in protocols if p.version is not None), None)
        domains = tuple(d for p in protocols for d in p.domains)
        return cls(version=version, domains=domains)


def split_ref(ref: str, current_domain: str) -> tuple[str, str]:
    """Split a Ref into ``(domain, type_id)``.

    Examples:
        >>> split_ref("Runtime.RemoteObject", "DOM")
        ('Runtime', 'RemoteObject')
        >>> split_ref("NodeId", "DOM")
        ('DOM', 'NodeId')
    """
    domain, sep, name = ref.partition(".")
    if not sep:
        return current_domain, ref
    return domain, name


def parse_protocol(raw: str | bytes, *, source: str | None = None) -> Protocol:
    """Decode one schema document into a Protocol.

    Raises:
        SchemaParseError: The document is not JSON or does not match the model.
    """
    try:
        return Protocol.model_validate_json(raw)
    except ValidationError as exc:
        msg = f"Malformed schema document ({exc.error_count()} validation errors): {exc}"
        raise SchemaParseError(msg, path=source) from exc


Items.model_rebuild()
Parameter.model_rebuild()
