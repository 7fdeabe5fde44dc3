"""OpenAPI document loader.

Decodes OpenAPI 3.x documents (JSON or YAML) and parses them into
OpenApiDocument models.
"""

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from openapi_to_http.errors import DocumentStructureError, InputDecodingError, MissingPathsError

from .base import Components, JsonSchema, OpenApiDocument, Operation, Parameter, PathItem

logger = logging.getLogger(__name__)

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")


def load_document(file_path: Path) -> dict:
    """Read a JSON or YAML file and return the decoded mapping."""
    text = file_path.read_text(encoding="utf-8")
    try:
        # JSON is a subset of YAML, one decoder covers both
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise InputDecodingError(f"Cannot decode {file_path}: {e}") from e

    if not isinstance(data, dict):
        raise InputDecodingError(f"{file_path} does not contain a mapping at its root")
    return data


def load_openapi(file_path: Path) -> OpenApiDocument:
    """Load and parse an OpenAPI file."""
    return parse_openapi(load_document(file_path))


def parse_openapi(doc: dict) -> OpenApiDocument:
    """Parse a decoded OpenAPI document.

    Raises MissingPathsError when the document has no `paths` mapping and
    DocumentStructureError when its content does not fit the model.
    """
    paths = doc.get("paths")
    if not isinstance(paths, dict):
        raise MissingPathsError("Document has no 'paths' mapping")

    try:
        return OpenApiDocument(
            paths={str(path): _parse_path_item(item, doc) for path, item in paths.items()},
            components=_parse_components(doc.get("components")),
        )
    except ValidationError as e:
        raise DocumentStructureError(f"Invalid OpenAPI document: {e}") from e


def _parse_path_item(item: dict | None, doc: dict) -> PathItem:
    if not isinstance(item, dict):
        return PathItem()

    operations = {}
    for method, operation in item.items():
        method = str(method).lower()
        if method not in HTTP_METHODS:
            continue
        if operation is None:
            operation = {}
        if not isinstance(operation, dict):
            logger.warning("Skipping %s operation that is not a mapping: %r", method.upper(), operation)
            continue
        operations[method] = _parse_operation(operation, doc)

    return PathItem(
        operations=operations,
        parameters=_parse_parameters(item.get("parameters") or [], doc),
    )


def _parse_operation(operation: dict, doc: dict) -> Operation:
    body = operation.get("requestBody")
    if body is not None:
        body = _resolve(body, doc)

    return Operation.model_validate(
        {
            "summary": operation.get("summary") or "",
            "parameters": _parse_parameters(operation.get("parameters") or [], doc),
            "requestBody": body,
            "responses": _parse_responses(operation.get("responses") or {}),
        }
    )


def _parse_parameters(params: list[dict], doc: dict) -> list[Parameter]:
    result = []
    for p in params:
        p = _resolve(p, doc)
        if "name" not in p or "in" not in p:
            logger.warning("Skipping parameter without name or location: %s", p)
            continue
        result.append(Parameter.model_validate(p))
    return result


def _parse_responses(responses: dict) -> dict:
    result = {}
    for status_code, resp in responses.items():
        description = resp.get("description", "") if isinstance(resp, dict) else ""
        result[str(status_code)] = {"description": description or ""}
    return result


def _parse_components(components: dict | None) -> Components:
    if not isinstance(components, dict):
        return Components()
    schemas = components.get("schemas")
    if not isinstance(schemas, dict):
        return Components()
    parsed = {}
    for name, schema in schemas.items():
        # validated one by one, a broken schema is skipped on its own
        try:
            parsed[str(name)] = JsonSchema.model_validate(schema)
        except ValidationError as e:
            logger.warning("Skipping component schema %s: %s", name, e)
    return Components(schemas=parsed)


def _resolve(node: dict, doc: dict) -> dict:
    """Follow a local `$ref` (`#/components/...`) one level; other nodes pass through."""
    ref = node.get("$ref") if isinstance(node, dict) else None
    if not isinstance(ref, str) or not ref.startswith("#/"):
        return node

    target = doc
    for part in ref[2:].split("/"):
        part = part.replace("~1", "/").replace("~0", "~")
        if not isinstance(target, dict) or part not in target:
            logger.warning("Unresolvable reference %s", ref)
            return {}
        target = target[part]
    return target if isinstance(target, dict) else {}
