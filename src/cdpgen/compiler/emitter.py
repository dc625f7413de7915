"""Module emitter: per-domain units and the merged compiled tree.

Domains may be compiled in any order; Refs are satisfied by lookup against
the complete protocol, not by emission order.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from cdpgen.compiler.commands import CommandCompiler
from cdpgen.compiler.dependencies import DependencyTracker
from cdpgen.compiler.resolver import DeclarationSink, TypeResolver
from cdpgen.domain.declarations import (
    FLOAT,
    INTEGER,
    JSON,
    UNSIGNED,
    CompiledTree,
    EventNamespace,
    EventUnion,
    EventUnionVariant,
    MethodBinding,
    ModuleUnit,
    ObjectDecl,
    TypeAlias,
)

if TYPE_CHECKING:
    from cdpgen.domain.schema import Domain, Protocol

logger = logging.getLogger(__name__)

EVENTS_NAMESPACE = "events"
EVENT_UNION_NAME = "Event"

SHARED_ALIASES: tuple[TypeAlias, ...] = (
    TypeAlias("JsInt", INTEGER),
    TypeAlias("JsUInt", UNSIGNED),
    TypeAlias("JsFloat", FLOAT),
    TypeAlias("Json", JSON),
    TypeAlias("CallId", UNSIGNED),
    TypeAlias("WindowId", UNSIGNED),
)


class Compilation:
    """One compilation run over an immutable protocol snapshot.

    Owns every accumulator used while compiling; nothing is shared between
    runs. Any schema error propagates out of :meth:`run` and no tree is
    produced.
    """

    def __init__(self, protocol: Protocol) -> None:
        self.protocol = protocol

    def compile_domain(self, domain: Domain) -> tuple[ModuleUnit, list[EventUnionVariant]]:
        """Compile one domain into its unit plus its event union variants."""
        name = domain.domain
        tracker = DependencyTracker(name, explicit=domain.dependencies)
        resolver = TypeResolver(self.protocol, tracker)
        commands = CommandCompiler(resolver, name)

        sink = DeclarationSink()
        sink.reserve(t.id for t in domain.types or ())
        for element in domain.types or ():
            resolver.resolve_element(element, sink, name)

        parameters: list[ObjectDecl] = []
        returns: list[ObjectDecl] = []
        methods: list[MethodBinding] = []
        for command in domain.commands:
            compiled = commands.compile_command(command, sink)
            parameters.append(compiled.parameters)
            returns.append(compiled.returns)
            methods.append(compiled.method)

        event_sink = DeclarationSink(namespace=EVENTS_NAMESPACE)
        variants = [
            commands.compile_event(event, event_sink).variant for event in domain.events or ()
        ]

        unit = ModuleUnit(
            domain=name,
            imports=tracker.imports,
            aliases=tuple(sink.aliases),
            enums=tuple(sink.enums),
            objects=tuple(sink.objects),
            parameters=tuple(parameters),
            returns=tuple(returns),
            methods=tuple(methods),
            events=EventNamespace(
                aliases=tuple(event_sink.aliases),
                enums=tuple(event_sink.enums),
                objects=tuple(event_sink.objects),
            ),
            description=domain.description,
        )
        logger.debug(
            "Compiled domain %s: %d types, %d commands, %d events, imports=%s",
            name,
            len(unit.aliases) + len(unit.enums) + len(unit.objects),
            len(methods),
            len(variants),
            ",".join(unit.imports) or "-",
        )
        return unit, variants

    def run(self) -> CompiledTree:
        """Compile every domain and merge the results into one tree."""
        modules: list[ModuleUnit] = []
        variants: list[EventUnionVariant] = []
        for domain in self.protocol.domains:
            unit, domain_variants = self.compile_domain(domain)
            modules.append(unit)
            variants.extend(domain_variants)

        version = None
        if self.protocol.version is not None:
            version = f"{self.protocol.version.major}.{self.protocol.version.minor}"

        return CompiledTree(
            shared_aliases=SHARED_ALIASES,
            modules=tuple(modules),
            events=EventUnion(EVENT_UNION_NAME, _unique_variants(variants)),
            version=version,
        )


def _unique_variants(variants: list[EventUnionVariant]) -> tuple[EventUnionVariant, ...]:
    """Suffix variant names that collide across domains (tags are already unique)."""
    seen: dict[str, int] = {}
    result: list[EventUnionVariant] = []
    for variant in variants:
        count = seen.get(variant.name, 0) + 1
        seen[variant.name] = count
        if count > 1:
            variant = EventUnionVariant(f"{variant.name}{count}", variant.tag, variant.payload)
        result.append(variant)
    return tuple(result)


def compile_protocol(protocol: Protocol) -> CompiledTree:
    """Compile *protocol* into a declaration tree (all-or-nothing)."""
    return Compilation(protocol).run()
