"""Naming normalizer: schema-authored names to target identifiers.

Pure functions. Wire spelling is never derived from these identifiers; the
compiler keeps the original name next to every generated one.
"""

from __future__ import annotations

import re

ENUM_SUFFIX = "Enum"
OBJECT_SUFFIX = "Object"
PARAMETERS_SUFFIX = "Parameters"
RETURN_SUFFIX = "ReturnObject"
EVENT_SUFFIX = "Event"
EVENT_PARAMS_SUFFIX = "EventParams"

# Exact-match substitutions only; this is not a keyword scanner.
RESERVED_FIELDS: dict[str, str] = {
    "type": "Type",
    "override": "Override",
}

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")
_WORD_SPLIT = re.compile(r"[^0-9A-Za-z]+")


def capitalize(name: str) -> str:
    """Upper-case the first character only: ``"attachToTarget"`` -> ``"AttachToTarget"``."""
    return name[:1].upper() + name[1:]


def camel_to_snake(name: str) -> str:
    """Split camelCase (and acronym runs) into snake_case.

    Examples:
        >>> camel_to_snake("targetId")
        'target_id'
        >>> camel_to_snake("backendDOMNodeId")
        'backend_dom_node_id'
    """
    words = [w for w in _WORD_SPLIT.split(name) if w]
    parts: list[str] = []
    for word in words:
        parts.extend(_CAMEL_BOUNDARY.split(word))
    return "_".join(p.lower() for p in parts if p)


def normalize_field(name: str) -> str:
    """Wire field name to field identifier, escaping reserved collisions."""
    if name in RESERVED_FIELDS:
        return RESERVED_FIELDS[name]
    return camel_to_snake(name)


def normalize_type(name: str) -> str:
    """Schema type ids are already conventionally cased."""
    return name


def pascal_case(text: str) -> str:
    """Generic word-boundary conversion to PascalCase.

    Examples:
        >>> pascal_case("mouseWheel")
        'MouseWheel'
        >>> pascal_case("target_id")
        'TargetId'
        >>> pascal_case("DOMContentLoaded")
        'DomContentLoaded'
    """
    return "".join(part.capitalize() for part in camel_to_snake(text).split("_") if part)


def field_pascal(name: str) -> str:
    """PascalCase form of a normalized field name, used inside synthesized names."""
    return pascal_case(normalize_field(name))


def synth_enum_name(scope: str, field: str) -> str:
    """Name for an enum declared inline on *field* of declaration *scope*.

    Distinct scopes or distinct fields always yield distinct names.
    """
    return f"{scope}{field_pascal(field)}{ENUM_SUFFIX}"


def synth_object_name(scope: str, field: str) -> str:
    """Name for an object literal declared inline on *field* of *scope*."""
    return f"{scope}{field_pascal(field)}{OBJECT_SUFFIX}"


def enum_variant_name(literal: str) -> str:
    """Variant identifier for one enum literal.

    Hyphenated literals are split on ``-`` with each segment capitalized and
    joined without separator; everything else goes through :func:`pascal_case`.

    Examples:
        >>> enum_variant_name("first-line")
        'FirstLine'
        >>> enum_variant_name("mousePressed")
        'MousePressed'
    """
    if "-" in literal:
        name = "".join(capitalize(segment) for segment in literal.split("-"))
        name = _WORD_SPLIT.sub("", name)
    else:
        name = pascal_case(literal)
    if not name:
        return "Empty"
    if name[0].isdigit():
        return f"_{name}"
    return name


def enum_variant_names(literals: tuple[str, ...] | list[str]) -> list[str]:
    """Variant identifiers for a literal list, one per literal, all distinct.

    Literals that normalize to an already-used identifier get the first free
    numeric suffix (``Foo``, ``Foo2``, ``Foo3``) so variants stay in bijection
    with literals.

    Examples:
        >>> enum_variant_names(["Foo", "Foo2", "foo"])
        ['Foo', 'Foo2', 'Foo3']
    """
    taken: set[str] = set()
    names: list[str] = []
    for literal in literals:
        base = enum_variant_name(literal)
        candidate = base
        counter = 1
        while candidate in taken:
            counter += 1
            candidate = f"{base}{counter}"
        taken.add(candidate)
        names.append(candidate)
    return names
