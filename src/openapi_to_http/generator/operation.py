"""Operation formatter — renders one method on one path as an .http request."""

import logging
from collections.abc import Iterable

from openapi_to_http.config import GeneratorConfig
from openapi_to_http.errors import UnsupportedMediaTypeError
from openapi_to_http.parser.base import JsonSchema, Operation, Parameter

from .schema import printable, render_schema, type_label

logger = logging.getLogger(__name__)

JSON_MEDIA_TYPE = "application/json"


def render_operation(
    method: str,
    path: str,
    operation: Operation,
    components: dict[str, JsonSchema] | None = None,
    config: GeneratorConfig | None = None,
    path_parameters: Iterable[Parameter] = (),
) -> str:
    """Render the comment header, request line and headers of one operation.

    Only the shape of the body is documented in comments; no payload is
    written. Path templates such as `{id}` are kept verbatim.
    """
    config = config or GeneratorConfig()
    components = components or {}
    output = []

    if config.include_parameters:
        parameters = _merge_parameters(path_parameters, operation.parameters)
        query = [p for p in parameters if p.location == "query"]
        in_path = [p for p in parameters if p.location == "path"]
        if query:
            output.append(_comment_section("Query", _parameter_lines(query, components, config)))
        if in_path:
            output.append(_comment_section("Parameters", _parameter_lines(in_path, components, config)))

    body_schema = _json_body_schema(method, path, operation, config)
    if body_schema is not None:
        output.append(_comment_section("Body", render_schema(body_schema, components, config)))

    output.append(f"{method.upper()} {path}")
    output.append(f"host: {{{{{config.host_variable}}}}}")

    if body_schema is not None:
        output.append(f"Content-Type: {JSON_MEDIA_TYPE}")

    return "\n".join(output)


def _json_body_schema(
    method: str, path: str, operation: Operation, config: GeneratorConfig
) -> JsonSchema | None:
    """Schema of the application/json request body, or None when there is none."""
    body = operation.request_body
    if body is None:
        return None

    for media_type, content in body.content.items():
        if media_type.split(";")[0].strip().lower() == JSON_MEDIA_TYPE:
            # a JSON entry without a schema is still documented as a body
            return content.media_schema or JsonSchema()

    message = f"{method.upper()} {path}: request body has no {JSON_MEDIA_TYPE} content"
    if config.strict:
        raise UnsupportedMediaTypeError(message)
    logger.debug("%s, rendering without body", message)
    return None


def _comment_section(title: str, lines: list[str]) -> str:
    """Format a `# Title` comment block, one `#  - ` line per entry.

    Leading indentation of an entry is kept in front of its dash.
    """
    entries = []
    for line in lines:
        text = line.lstrip(" ")
        indent = line[: len(line) - len(text)]
        entries.append(f"#  {indent}- {text}\n")
    return f"# {title}\n{''.join(entries)}#"


def _parameter_lines(
    parameters: list[Parameter], components: dict[str, JsonSchema], config: GeneratorConfig
) -> list[str]:
    lines = []
    for p in parameters:
        optional = "" if p.required else "?"
        label = type_label(p.param_schema, components, config.strict) if p.param_schema else "String"
        lines.append(f"{printable(p.name)}{optional}: {label}")
    return lines


def _merge_parameters(
    path_parameters: Iterable[Parameter], operation_parameters: list[Parameter]
) -> list[Parameter]:
    """Path-level parameters overridden by operation parameters of the same name and location."""
    merged = {(p.name, p.location): p for p in path_parameters}
    for p in operation_parameters:
        merged[(p.name, p.location)] = p
    return list(merged.values())
