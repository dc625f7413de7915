"""Abstract declaration tree produced by the compiler.

The tree is target-language neutral: type expressions and declarations are
frozen dataclasses, and the renderer turns them into source text. Every
declaration carries a ``kind`` discriminator so consumers can dispatch on it.

Identifier naming and wire spelling are kept apart: fields carry
``wire_name`` and enum variants carry ``wire`` verbatim from the schema.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from functools import cached_property
from typing import Literal


class Primitive(StrEnum):
    """Fixed target primitives."""

    BOOLEAN = "boolean"
    STRING = "string"
    INTEGER = "int64"
    UNSIGNED = "uint32"
    FLOAT = "float64"
    JSON = "json"


# ── Type expressions ────────────────────────────────────────────────────


@dataclass(frozen=True)
class PrimitiveType:
    primitive: Primitive
    kind: Literal["primitive"] = "primitive"


@dataclass(frozen=True)
class NamedRef:
    """Reference to a declaration by name.

    *namespace* is set for declarations nested below a domain (``"events"``).
    """

    domain: str
    name: str
    namespace: str | None = None
    kind: Literal["ref"] = "ref"

    @property
    def qualified(self) -> str:
        parts = [self.domain, self.namespace, self.name]
        return ".".join(p for p in parts if p)


@dataclass(frozen=True)
class SequenceType:
    item: TypeExpr
    kind: Literal["sequence"] = "sequence"


@dataclass(frozen=True)
class OptionalType:
    inner: TypeExpr
    kind: Literal["optional"] = "optional"


@dataclass(frozen=True)
class BoxedType:
    """Owning indirection, used for self-referential fields."""

    inner: TypeExpr
    kind: Literal["boxed"] = "boxed"


TypeExpr = PrimitiveType | NamedRef | SequenceType | OptionalType | BoxedType

BOOLEAN = PrimitiveType(Primitive.BOOLEAN)
STRING = PrimitiveType(Primitive.STRING)
INTEGER = PrimitiveType(Primitive.INTEGER)
UNSIGNED = PrimitiveType(Primitive.UNSIGNED)
FLOAT = PrimitiveType(Primitive.FLOAT)
JSON = PrimitiveType(Primitive.JSON)


# ── Declarations ────────────────────────────────────────────────────────


@dataclass(frozen=True)
class TypeAlias:
    """``name`` is another name for ``target``.

    An alias whose target is ``JSON`` is the opaque placeholder used for
    shapeless objects and parameterless events.
    """

    name: str
    target: TypeExpr
    description: str | None = None
    kind: Literal["alias"] = "alias"

    @property
    def opaque(self) -> bool:
        return self.target == JSON


@dataclass(frozen=True)
class EnumVariant:
    name: str
    wire: str


@dataclass(frozen=True)
class EnumDecl:
    name: str
    variants: tuple[EnumVariant, ...]
    description: str | None = None
    kind: Literal["enum"] = "enum"


@dataclass(frozen=True)
class FieldDecl:
    """One object field.

    ``optional`` fields are wrapped in OptionalType and are omitted from
    output when absent.
    """

    name: str
    wire_name: str
    type: TypeExpr
    optional: bool = False
    description: str | None = None


@dataclass(frozen=True)
class ObjectDecl:
    name: str
    fields: tuple[FieldDecl, ...] = ()
    description: str | None = None
    kind: Literal["object"] = "object"


@dataclass(frozen=True)
class MethodBinding:
    """Typed dispatch descriptor for one command."""

    name: str
    parameters: NamedRef
    returns: NamedRef
    description: str | None = None
    kind: Literal["method"] = "method"


@dataclass(frozen=True)
class EventUnionVariant:
    """One arm of the global event union, tagged by its wire method name."""

    name: str
    tag: str
    payload: NamedRef
    kind: Literal["event_variant"] = "event_variant"


Declaration = TypeAlias | EnumDecl | ObjectDecl | MethodBinding | EventUnionVariant


# ── Emission units ──────────────────────────────────────────────────────


@dataclass(frozen=True)
class EventNamespace:
    """Declarations nested under a domain's ``events`` namespace."""

    aliases: tuple[TypeAlias, ...] = ()
    enums: tuple[EnumDecl, ...] = ()
    objects: tuple[ObjectDecl, ...] = ()

    def declarations(self) -> list[Declaration]:
        return [*self.aliases, *self.enums, *self.objects]


@dataclass(frozen=True)
class ModuleUnit:
    """Everything emitted for one domain, in emission order."""

    domain: str
    imports: tuple[str, ...] = ()
    aliases: tuple[TypeAlias, ...] = ()
    enums: tuple[EnumDecl, ...] = ()
    objects: tuple[ObjectDecl, ...] = ()
    parameters: tuple[ObjectDecl, ...] = ()
    returns: tuple[ObjectDecl, ...] = ()
    methods: tuple[MethodBinding, ...] = ()
    events: EventNamespace = field(default_factory=EventNamespace)
    description: str | None = None

    def declarations(self) -> list[Declaration]:
        """Top-level declarations of this unit in emission order."""
        return [
            *self.aliases,
            *self.enums,
            *self.objects,
            *self.parameters,
            *self.returns,
            *self.methods,
        ]

    def find(self, name: str) -> Declaration | None:
        """Look up a declaration by name, including the events namespace."""
        for decl in [*self.declarations(), *self.events.declarations()]:
            if getattr(decl, "name", None) == name:
                return decl
        return None


@dataclass(frozen=True)
class EventUnion:
    name: str
    variants: tuple[EventUnionVariant, ...] = ()


@dataclass(frozen=True)
class CompiledTree:
    """Root of the compiler output: shared namespace plus one unit per domain."""

    shared_aliases: tuple[TypeAlias, ...]
    modules: tuple[ModuleUnit, ...]
    events: EventUnion
    version: str | None = None

    def module(self, domain: str) -> ModuleUnit | None:
        for unit in self.modules:
            if unit.domain == domain:
                return unit
        return None

    @cached_property
    def method_table(self) -> dict[str, MethodBinding]:
        """Map wire method name to its binding, in schema order; built on first access."""
        return {m.name: m for unit in self.modules for m in unit.methods}
