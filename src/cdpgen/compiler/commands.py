"""Command and event compilation.

A command becomes a Parameters object, a ReturnObject object, and one
:class:`MethodBinding`. An event becomes an inner Params declaration, an
envelope object, and one variant of the global event union.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from cdpgen.compiler.resolver import ResolutionContext
from cdpgen.domain.declarations import (
    JSON,
    EventUnionVariant,
    FieldDecl,
    MethodBinding,
    ObjectDecl,
    TypeAlias,
)
from cdpgen.domain.naming import (
    EVENT_PARAMS_SUFFIX,
    EVENT_SUFFIX,
    PARAMETERS_SUFFIX,
    RETURN_SUFFIX,
    capitalize,
)

if TYPE_CHECKING:
    from cdpgen.compiler.resolver import DeclarationSink, TypeResolver
    from cdpgen.domain.schema import Command, Event

ENVELOPE_FIELD = "params"


@dataclass(frozen=True)
class CompiledCommand:
    parameters: ObjectDecl
    returns: ObjectDecl
    method: MethodBinding


@dataclass(frozen=True)
class CompiledEvent:
    params: ObjectDecl | TypeAlias
    envelope: ObjectDecl
    variant: EventUnionVariant


class CommandCompiler:
    """Compile the commands and events of one domain.

    Parameter and return lists go through the same per-field resolution as
    object properties, so inline enums and objects land in the same sinks.
    """

    def __init__(self, resolver: TypeResolver, domain: str) -> None:
        self._resolver = resolver
        self._domain = domain

    def compile_command(self, command: Command, sink: DeclarationSink) -> CompiledCommand:
        """Build both declarations and the binding for *command*.

        Commands without parameters or returns still get a concrete, empty
        declaration.
        """
        base = capitalize(command.name)
        path = f"{self._domain}.{command.name}"

        params_name = sink.claim(f"{base}{PARAMETERS_SUFFIX}")
        params_ctx = ResolutionContext(self._domain, params_name, sink, path)
        parameters = ObjectDecl(
            params_name,
            self._resolver.resolve_fields(command.parameters or (), params_ctx),
            command.description,
        )

        returns_name = sink.claim(f"{base}{RETURN_SUFFIX}")
        returns_ctx = ResolutionContext(self._domain, returns_name, sink, path)
        returns = ObjectDecl(
            returns_name,
            self._resolver.resolve_fields(command.returns or (), returns_ctx),
        )

        method = MethodBinding(
            name=f"{self._domain}.{command.name}",
            parameters=params_ctx.ref(params_name),
            returns=returns_ctx.ref(returns_name),
            description=command.description,
        )
        return CompiledCommand(parameters, returns, method)

    def compile_event(self, event: Event, sink: DeclarationSink) -> CompiledEvent:
        """Build the Params declaration, the envelope, and the union variant.

        *sink* is the domain's event namespace sink. A parameterless event
        gets the opaque placeholder as its Params.
        """
        base = capitalize(event.name)
        path = f"{self._domain}.{event.name}"

        params_name = sink.claim(f"{base}{EVENT_PARAMS_SUFFIX}")
        params_ctx = ResolutionContext(self._domain, params_name, sink, path)
        params: ObjectDecl | TypeAlias
        if event.parameters:
            fields = self._resolver.resolve_fields(event.parameters, params_ctx)
            params = ObjectDecl(params_name, fields, event.description)
        else:
            params = TypeAlias(params_name, JSON, event.description)
        sink.add(params)

        envelope_name = sink.claim(f"{base}{EVENT_SUFFIX}")
        envelope = ObjectDecl(
            envelope_name,
            (
                FieldDecl(
                    name=ENVELOPE_FIELD,
                    wire_name=ENVELOPE_FIELD,
                    type=params_ctx.ref(params_name),
                ),
            ),
            event.description,
        )
        sink.add(envelope)

        variant = EventUnionVariant(
            name=f"{self._domain}{base}",
            tag=f"{self._domain}.{event.name}",
            payload=params_ctx.ref(envelope_name),
        )
        return CompiledEvent(params, envelope, variant)
