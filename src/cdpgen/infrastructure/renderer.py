"""Render a compiled declaration tree as a Python (pydantic v2) module.

The generated module is self-contained: one class namespace per domain,
``type`` statements for aliases, ``StrEnum`` enums carrying the wire literal
as their value, and ``ProtocolModel`` subclasses with ``Field(alias=...)``
on every field. References are always fully qualified through the module's
root namespace (``_Domains.DOM.NodeId``) and resolved lazily, so emission
order never matters and a declaration named after its own domain cannot
shadow the domain class.

Identifier escaping that only Python needs (keywords, pydantic attribute
names) happens here; the declaration tree keeps its own names.
"""

from __future__ import annotations

import keyword
import logging
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from cdpgen import __version__
from cdpgen.compiler.emitter import EVENTS_NAMESPACE
from cdpgen.domain.declarations import (
    BoxedType,
    FieldDecl,
    MethodBinding,
    NamedRef,
    OptionalType,
    Primitive,
    PrimitiveType,
    SequenceType,
    TypeExpr,
)
from cdpgen.domain.naming import camel_to_snake
from cdpgen.infrastructure.templates import build_template_environment

if TYPE_CHECKING:
    from pathlib import Path

    from jinja2 import Environment

    from cdpgen.domain.declarations import CompiledTree

logger = logging.getLogger(__name__)

TEMPLATE_GROUP = "python"
MODULE_TEMPLATE = "module.py.j2"

# Annotation used for a primitive at a field site.
PRIMITIVE_NAMES: dict[Primitive, str] = {
    Primitive.BOOLEAN: "bool",
    Primitive.STRING: "str",
    Primitive.INTEGER: "JsInt",
    Primitive.UNSIGNED: "JsUInt",
    Primitive.FLOAT: "JsFloat",
    Primitive.JSON: "Json",
}

# Builtin a shared alias stands for.
PRIMITIVE_BUILTINS: dict[Primitive, str] = {
    Primitive.BOOLEAN: "bool",
    Primitive.STRING: "str",
    Primitive.INTEGER: "int",
    Primitive.UNSIGNED: "int",
    Primitive.FLOAT: "float",
    Primitive.JSON: "Any",
}

NAMESPACE_CLASSES: dict[str, str] = {EVENTS_NAMESPACE: "Events"}

# Module-level class holding every domain class; schema ids never start with "_".
ROOT_NAMESPACE = "_Domains"

_MODEL_ATTRIBUTES = frozenset(name for name in dir(BaseModel) if not name.startswith("__"))


def py_identifier(name: str) -> str:
    """Escape *name* so it is a legal, non-shadowing Python attribute.

    Examples:
        >>> py_identifier("None")
        'None_'
        >>> py_identifier("node_id")
        'node_id'
    """
    if keyword.iskeyword(name) or name in _MODEL_ATTRIBUTES:
        return f"{name}_"
    if name[:1].isdigit():
        return f"field_{name}"
    return name


def render_ref(ref: NamedRef) -> str:
    namespace = NAMESPACE_CLASSES.get(ref.namespace or "", ref.namespace)
    parts = [ROOT_NAMESPACE, ref.domain, namespace, ref.name]
    return ".".join(p for p in parts if p)


def render_type(expr: TypeExpr) -> str:
    """Python annotation for a type expression.

    Boxing has no Python counterpart: references are already indirect.
    """
    if isinstance(expr, PrimitiveType):
        return PRIMITIVE_NAMES[expr.primitive]
    if isinstance(expr, NamedRef):
        return render_ref(expr)
    if isinstance(expr, SequenceType):
        return f"list[{render_type(expr.item)}]"
    if isinstance(expr, OptionalType):
        return f"{render_type(expr.inner)} | None"
    if isinstance(expr, BoxedType):
        return render_type(expr.inner)
    msg = f"Unknown type expression: {expr!r}"
    raise TypeError(msg)


def render_builtin(expr: TypeExpr) -> str:
    """Right-hand side of a shared alias."""
    if isinstance(expr, PrimitiveType):
        return PRIMITIVE_BUILTINS[expr.primitive]
    return render_type(expr)


def render_field(field: FieldDecl) -> str:
    args: list[str] = []
    if field.optional:
        args.append("default=None")
    args.append(f"alias={field.wire_name!r}")
    if field.description:
        args.append(f"description={field.description!r}")
    return f"{py_identifier(field.name)}: {render_type(field.type)} = Field({', '.join(args)})"


def method_attribute(binding: MethodBinding) -> str:
    """Attribute name of a command inside its domain class (``Target.attach_to_target``)."""
    _, _, command = binding.name.partition(".")
    return py_identifier(camel_to_snake(command))


def render_method(binding: MethodBinding) -> str:
    return (
        f"{method_attribute(binding)} = Method("
        f"{binding.name!r}, {binding.parameters.name}, {binding.returns.name})"
    )


def docstring(text: str | None) -> str:
    """Make *text* safe between triple double quotes."""
    if not text:
        return ""
    body = text.strip().replace("\\", "\\\\").replace('"""', '\\"\\"\\"')
    if body.endswith('"'):
        body = f"{body} "
    return body


def comment(text: str | None) -> str:
    if not text:
        return ""
    return "\n".join(f"# {line}".rstrip() for line in text.strip().splitlines())


class PythonRenderer:
    """Turn a :class:`CompiledTree` into the source text of one module.

    Templates come from ``cdpgen/templates/python`` and can be overridden
    per project (see :func:`build_template_environment`).
    """

    def __init__(
        self,
        *,
        project_root: Path | None = None,
        template_dir: Path | None = None,
        environment: Environment | None = None,
    ) -> None:
        self.env = environment or build_template_environment(
            TEMPLATE_GROUP,
            project_root=project_root,
            extra_dir=template_dir,
        )
        self.env.filters.update(
            pytype=render_type,
            pybuiltin=render_builtin,
            pyident=py_identifier,
            pyfield=render_field,
            pymethod=render_method,
            pyref=render_ref,
            pyrepr=repr,
            docstring=docstring,
            comment=comment,
        )

    def context(self, tree: CompiledTree) -> dict[str, Any]:
        envelopes = {
            (v.payload.domain, v.payload.name): v.tag for v in tree.events.variants
        }
        return {
            "tree": tree,
            "generator_version": __version__,
            "envelopes": envelopes,
            "method_table": tree.method_table,
            "method_attribute": method_attribute,
            "root_namespace": ROOT_NAMESPACE,
        }

    def render(self, tree: CompiledTree) -> str:
        template = self.env.get_template(MODULE_TEMPLATE)
        text = template.render(**self.context(tree))
        logger.debug("Rendered %d characters for %d domains", len(text), len(tree.modules))
        return text
