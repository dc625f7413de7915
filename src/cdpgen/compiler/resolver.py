"""Type resolver: schema type nodes to target type expressions.

Resolution is recursive. Inline string enums and inline object literals are
turned into new declarations as they are discovered; those side-declarations
go into a :class:`DeclarationSink` carried by the :class:`ResolutionContext`
rather than into lists threaded through every call.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from cdpgen.domain.declarations import (
    BOOLEAN,
    FLOAT,
    INTEGER,
    JSON,
    STRING,
    BoxedType,
    EnumDecl,
    EnumVariant,
    FieldDecl,
    NamedRef,
    ObjectDecl,
    OptionalType,
    SequenceType,
    TypeAlias,
    TypeExpr,
)
from cdpgen.domain.errors import SchemaReferenceError, SchemaShapeError
from cdpgen.domain.naming import (
    enum_variant_names,
    normalize_field,
    normalize_type,
    synth_enum_name,
    synth_object_name,
)
from cdpgen.domain.schema import TypeEnum, split_ref

if TYPE_CHECKING:
    from collections.abc import Iterable

    from cdpgen.compiler.dependencies import DependencyTracker
    from cdpgen.domain.schema import Items, Parameter, Protocol, TypeElement

    ShapeNode = Parameter | Items | TypeElement

logger = logging.getLogger(__name__)

_PRIMITIVES: dict[TypeEnum, TypeExpr] = {
    TypeEnum.BOOLEAN: BOOLEAN,
    TypeEnum.INTEGER: INTEGER,
    TypeEnum.NUMBER: FLOAT,
    TypeEnum.ANY: JSON,
}


@dataclass
class DeclarationSink:
    """Ordered accumulator for declarations of one namespace.

    Names are claimed through :meth:`claim`; a synthesized name that is
    already taken gets a numeric suffix, so every name in the namespace is
    unique and discovery order is preserved.
    """

    namespace: str | None = None
    aliases: list[TypeAlias] = field(default_factory=list)
    enums: list[EnumDecl] = field(default_factory=list)
    objects: list[ObjectDecl] = field(default_factory=list)
    _taken: set[str] = field(default_factory=set)
    _reserved: set[str] = field(default_factory=set)

    def reserve(self, names: Iterable[str]) -> None:
        """Pre-claim declared ids so synthesized names never shadow them."""
        self._reserved.update(names)

    def claim(self, name: str, *, declared: bool = False) -> str:
        """Claim *name* (or a suffixed variant) and return the claimed name.

        Declared ids were reserved up front and are returned unchanged.
        """
        if declared and name in self._reserved and name not in self._taken:
            self._taken.add(name)
            return name
        candidate = name
        counter = 1
        while candidate in self._taken or candidate in self._reserved:
            counter += 1
            candidate = f"{name}{counter}"
        self._taken.add(candidate)
        return candidate

    def add(self, decl: TypeAlias | EnumDecl | ObjectDecl) -> None:
        if isinstance(decl, TypeAlias):
            self.aliases.append(decl)
        elif isinstance(decl, EnumDecl):
            self.enums.append(decl)
        else:
            self.objects.append(decl)


@dataclass(frozen=True)
class ResolutionContext:
    """Where a node is being resolved.

    Attributes:
        domain: Domain owning the declaration under construction.
        scope: Id of the enclosing declaration (drives synthesized names and
            self-reference detection).
        sink: Accumulator for side-declarations.
        path: Dotted location for error reports.
    """

    domain: str
    scope: str
    sink: DeclarationSink
    path: str

    def enter(self, scope: str) -> ResolutionContext:
        """Context for the fields of a nested declaration named *scope*."""
        return ResolutionContext(self.domain, scope, self.sink, f"{self.path}.{scope}")

    def ref(self, name: str) -> NamedRef:
        """Reference to a declaration living in this context's namespace."""
        return NamedRef(self.domain, name, self.sink.namespace)


class TypeResolver:
    """Resolve schema nodes of one domain against the complete protocol."""

    def __init__(self, protocol: Protocol, tracker: DependencyTracker) -> None:
        self._protocol = protocol
        self._tracker = tracker

    # ── Top-level type elements ───────────────────────────────────────────

    def resolve_element(self, element: TypeElement, sink: DeclarationSink, domain: str) -> None:
        """Emit the declaration for a domain-level TypeElement into *sink*."""
        name = sink.claim(normalize_type(element.id), declared=True)
        ctx = ResolutionContext(domain, name, sink, f"{domain}.{element.id}")

        if element.type is TypeEnum.OBJECT:
            if element.properties:
                fields = self.resolve_fields(element.properties, ctx)
                sink.add(ObjectDecl(name, fields, element.description))
            else:
                sink.add(TypeAlias(name, JSON, element.description))
        elif element.type is TypeEnum.STRING and element.enum is not None:
            sink.add(self._enum_decl(name, element.enum, element.description, ctx.path))
        else:
            target = self._resolve_shape(element.type, element, ctx, "items")
            sink.add(TypeAlias(name, target, element.description))

    # ── Fields ────────────────────────────────────────────────────────────

    def resolve_fields(
        self,
        params: Iterable[Parameter],
        ctx: ResolutionContext,
    ) -> tuple[FieldDecl, ...]:
        return tuple(self.resolve_field(param, ctx) for param in params)

    def resolve_field(self, param: Parameter, ctx: ResolutionContext) -> FieldDecl:
        """Resolve one property/parameter into a field declaration.

        Optional fields are wrapped at the field site, independent of shape.
        """
        expr = self._resolve_node(param, ctx, param.name)
        if param.optional:
            expr = OptionalType(expr)
        return FieldDecl(
            name=normalize_field(param.name),
            wire_name=param.name,
            type=expr,
            optional=param.optional,
            description=param.description,
        )

    # ── Dispatch ──────────────────────────────────────────────────────────

    def _resolve_node(self, node: ShapeNode, ctx: ResolutionContext, field_name: str) -> TypeExpr:
        if node.type is None:
            if node.ref is None:
                raise SchemaShapeError(
                    "Node declares neither a type nor a $ref",
                    path=f"{ctx.path}.{field_name}",
                )
            return self._resolve_ref(node.ref, ctx, field_name)
        return self._resolve_shape(node.type, node, ctx, field_name)

    def _resolve_shape(
        self,
        type_enum: TypeEnum,
        node: ShapeNode,
        ctx: ResolutionContext,
        field_name: str,
    ) -> TypeExpr:
        primitive = _PRIMITIVES.get(type_enum)
        if primitive is not None:
            return primitive

        if type_enum is TypeEnum.STRING:
            if node.enum is None:
                return STRING
            name = ctx.sink.claim(synth_enum_name(ctx.scope, field_name))
            description = getattr(node, "description", None)
            path = f"{ctx.path}.{field_name}"
            ctx.sink.add(self._enum_decl(name, node.enum, description, path))
            return ctx.ref(name)

        if type_enum is TypeEnum.ARRAY:
            return self._resolve_array(node, ctx, field_name)

        return self._resolve_object(node, ctx, field_name)

    def _resolve_array(self, node: ShapeNode, ctx: ResolutionContext, field_name: str) -> TypeExpr:
        items = node.items
        if items is None:
            raise SchemaShapeError("Array declares no items", path=f"{ctx.path}.{field_name}")
        if items.type is None and items.ref is not None:
            # A sequence already owns its elements; no box for self-reference.
            return SequenceType(self._resolve_ref(items.ref, ctx, field_name, box_self=False))
        return SequenceType(self._resolve_node(items, ctx, field_name))

    def _resolve_object(self, node: ShapeNode, ctx: ResolutionContext, field_name: str) -> TypeExpr:
        if not node.properties:
            return JSON
        name = ctx.sink.claim(synth_object_name(ctx.scope, field_name))
        fields = self.resolve_fields(node.properties, ctx.enter(name))
        ctx.sink.add(ObjectDecl(name, fields, getattr(node, "description", None)))
        return ctx.ref(name)

    def _resolve_ref(
        self,
        ref: str,
        ctx: ResolutionContext,
        field_name: str,
        *,
        box_self: bool = True,
    ) -> TypeExpr:
        domain, type_id = split_ref(ref, ctx.domain)
        if self._protocol.find_type(domain, type_id) is None:
            raise SchemaReferenceError(
                f"Unresolved $ref {ref!r}",
                path=f"{ctx.path}.{field_name}",
            )
        added = self._tracker.register(ref)
        if added:
            logger.debug("Domain %s now imports %s (via %s)", ctx.domain, added, ref)

        target = NamedRef(domain, normalize_type(type_id))
        if box_self and domain == ctx.domain and type_id == ctx.scope:
            return BoxedType(target)
        return target

    # ── Helpers ───────────────────────────────────────────────────────────

    @staticmethod
    def _enum_decl(
        name: str,
        literals: tuple[str, ...],
        description: str | None,
        path: str,
    ) -> EnumDecl:
        if not literals:
            raise SchemaShapeError("String enum declares no literals", path=path)
        variants = tuple(
            EnumVariant(name=variant, wire=literal)
            for variant, literal in zip(enum_variant_names(literals), literals, strict=True)
        )
        return EnumDecl(name, variants, description)
