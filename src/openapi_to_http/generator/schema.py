"""Schema walker — lists the properties of a JSON Schema as readable lines.

Each property becomes one line: `name` (with `?` when optional), a colon
and a capitalised type label. Nested objects (directly or as array items)
are listed below their parent, indented by two spaces per level.
"""

import logging
import re

from openapi_to_http.config import GeneratorConfig
from openapi_to_http.errors import MalformedSchemaError
from openapi_to_http.parser.base import JsonSchema

logger = logging.getLogger(__name__)

TYPE_LABELS = {
    "string": "String",
    "number": "Number",
    "integer": "Integer",
    "boolean": "Boolean",
    "array": "Array",
    "object": "Object",
    "null": "Null",
}
FALLBACK_LABEL = "Any"
REF_PREFIX = "#/components/schemas/"
INDENT = "  "
CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")


def render_schema(
    schema: JsonSchema,
    components: dict[str, JsonSchema] | None = None,
    config: GeneratorConfig | None = None,
) -> list[str]:
    """Return one line per property of an object schema, nested lines indented.

    Non-object schemas and objects without properties yield no lines.
    """
    components = components or {}
    strict = (config or GeneratorConfig()).strict

    root, seen = _deref(schema, components, frozenset())
    if root is None:
        _malformed(f"Unresolvable reference {schema.ref!r}", strict)
        return []
    if not _is_object(root):
        return []
    return _walk(root, components, strict, 0, seen)


def type_label(
    schema: JsonSchema,
    components: dict[str, JsonSchema] | None = None,
    strict: bool = False,
    _seen: frozenset = frozenset(),
) -> str:
    """Return the display label for a schema's type, `Any` when it has none."""
    components = components or {}
    resolved = _resolve_ref(schema, components, _seen)
    if resolved is None:
        _malformed(f"Unresolvable reference {schema.ref!r}", strict)
        return FALLBACK_LABEL
    schema = resolved

    if schema.boolean_schema:
        # `true` / `false` schemas carry no type of their own
        return FALLBACK_LABEL
    if schema.type is None:
        if schema.properties:
            return TYPE_LABELS["object"]
        if schema.items is not None:
            return TYPE_LABELS["array"]
        members = schema.all_of or schema.any_of or schema.one_of
        if members:
            seen = _seen | {id(schema)}
            labels = [type_label(m, components, strict, seen) for m in members]
            return ",".join(dict.fromkeys(labels))
        _malformed("Schema has no type", strict)
        return FALLBACK_LABEL

    types = [schema.type] if isinstance(schema.type, str) else schema.type
    labels = []
    for t in types:
        label = TYPE_LABELS.get(t)
        if label is None:
            _malformed(f"Unrecognised schema type {t!r}", strict)
            label = FALLBACK_LABEL
        if label not in labels:
            labels.append(label)
    if not labels:
        _malformed("Schema has an empty type list", strict)
        return FALLBACK_LABEL
    return ",".join(labels)


def printable(text: str) -> str:
    """Escape control characters so a name cannot break out of its comment line."""
    return CONTROL_CHARS.sub(lambda m: m.group().encode("unicode_escape").decode("ascii"), text)


def _walk(
    schema: JsonSchema,
    components: dict[str, JsonSchema],
    strict: bool,
    depth: int,
    seen: frozenset,
) -> list[str]:
    lines = []
    properties, required = _properties(schema, components, seen)
    for name, prop in properties.items():
        optional = "" if name in required else "?"
        label = type_label(prop, components, strict)
        lines.append(f"{INDENT * depth}{printable(name)}{optional}: {label}")

        child, child_seen = _nested(prop, components, seen)
        if child is not None:
            lines.extend(_walk(child, components, strict, depth + 1, child_seen))
    return lines


def _properties(
    schema: JsonSchema, components: dict[str, JsonSchema], seen: frozenset
) -> tuple[dict[str, JsonSchema], set[str]]:
    """Own properties followed by those merged in from `allOf` members."""
    properties = dict(schema.properties)
    required = set(schema.required)
    for member in schema.all_of:
        member, member_seen = _deref(member, components, seen)
        if member is None:
            continue
        member_properties, member_required = _properties(member, components, member_seen)
        for name, prop in member_properties.items():
            properties.setdefault(name, prop)
        required |= member_required
    return properties, required


def _nested(
    prop: JsonSchema, components: dict[str, JsonSchema], seen: frozenset
) -> tuple[JsonSchema | None, frozenset]:
    """The schema whose properties are listed under `prop`, if any."""
    prop, seen = _deref(prop, components, seen)
    if prop is None:
        return None, seen
    if prop.items is not None and not prop.properties and not prop.all_of:
        return _deref(prop.items, components, seen)
    return prop, seen


def _deref(
    schema: JsonSchema, components: dict[str, JsonSchema], seen: frozenset
) -> tuple[JsonSchema | None, frozenset]:
    """Follow `$ref`s, returning None on a cycle or a dangling reference.

    `seen` holds the references already expanded on the current branch.
    """
    while schema.ref is not None:
        if schema.ref in seen:
            return None, seen
        target = _lookup(schema.ref, components)
        if target is None:
            return None, seen
        seen = seen | {schema.ref}
        schema = target
    return schema, seen


def _resolve_ref(
    schema: JsonSchema, components: dict[str, JsonSchema], seen: frozenset
) -> JsonSchema | None:
    visited = set()
    while schema.ref is not None:
        if schema.ref in visited:
            return None
        visited.add(schema.ref)
        target = _lookup(schema.ref, components)
        if target is None:
            return None
        schema = target
    if id(schema) in seen:
        # composition loop: label it, do not descend again
        return JsonSchema(type="object")
    return schema


def _lookup(ref: str, components: dict[str, JsonSchema]) -> JsonSchema | None:
    if not ref.startswith(REF_PREFIX):
        return None
    return components.get(ref[len(REF_PREFIX):])


def _is_object(schema: JsonSchema) -> bool:
    if schema.type is None:
        return True
    if isinstance(schema.type, str):
        return schema.type == "object"
    return "object" in schema.type


def _malformed(message: str, strict: bool) -> None:
    if strict:
        raise MalformedSchemaError(message)
    logger.warning("%s, using %r", message, FALLBACK_LABEL)
