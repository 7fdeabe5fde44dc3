"""Data models for parsed OpenAPI documents and rendered output.

The loader converts the decoded document into these models; the
generators only ever read them. Mappings keep the declaration order of
the source document so rendering is deterministic.
"""

import logging
from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

logger = logging.getLogger(__name__)


class JsonSchema(BaseModel):
    """A (subset of a) JSON Schema node as found in request bodies.

    Irregular nodes are normalised before validation instead of failing
    the whole document: boolean schemas (`true`/`false`) become empty
    schemas flagged with `boolean_schema`, and keywords of the wrong
    shape are dropped with a warning.
    """

    model_config = ConfigDict(populate_by_name=True)

    type: str | list[str] | None = None
    properties: dict[str, "JsonSchema"] = {}
    required: list[str] = []
    items: "JsonSchema | None" = None
    all_of: list["JsonSchema"] = Field(default=[], alias="allOf")
    any_of: list["JsonSchema"] = Field(default=[], alias="anyOf")
    one_of: list["JsonSchema"] = Field(default=[], alias="oneOf")
    ref: str | None = Field(default=None, alias="$ref")
    boolean_schema: bool = False

    @model_validator(mode="before")
    @classmethod
    def _normalise(cls, data: Any) -> Any:
        if isinstance(data, BaseModel):
            return data
        if isinstance(data, bool):
            return {"boolean_schema": True}
        if not isinstance(data, dict):
            logger.warning("Ignoring schema that is not a mapping: %r", data)
            return {}

        data = dict(data)
        _drop_unless(data, "type", _is_type_keyword)
        _drop_unless(data, "properties", lambda v: isinstance(v, dict))
        _drop_unless(data, "required", lambda v: isinstance(v, list))
        _drop_unless(data, "items", lambda v: isinstance(v, (dict, bool)))
        _drop_unless(data, "$ref", lambda v: isinstance(v, str))
        for key in ("allOf", "anyOf", "oneOf"):
            _drop_unless(data, key, lambda v: isinstance(v, list))

        if "properties" in data:
            data["properties"] = {str(name): s for name, s in data["properties"].items()}
        if "required" in data:
            data["required"] = [name for name in data["required"] if isinstance(name, str)]
        return data


def _drop_unless(data: dict, key: str, valid: Callable[[Any], bool]) -> None:
    if key in data and not valid(data[key]):
        logger.warning("Ignoring schema keyword %r with unexpected value %r", key, data.pop(key))


def _is_type_keyword(value: Any) -> bool:
    if isinstance(value, list):
        return all(isinstance(t, str) for t in value)
    return isinstance(value, str)


class Parameter(BaseModel):
    """A single operation parameter (query, path, header, or cookie)."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    location: str = Field(alias="in")  # query / path / header / cookie
    required: bool = False
    param_schema: JsonSchema | None = Field(default=None, alias="schema")


class MediaType(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    media_schema: JsonSchema | None = Field(default=None, alias="schema")


class RequestBody(BaseModel):
    description: str = ""
    content: dict[str, MediaType] = {}
    required: bool = False


class Response(BaseModel):
    description: str = ""


class Operation(BaseModel):
    """One HTTP method on one path."""

    model_config = ConfigDict(populate_by_name=True)

    summary: str = ""
    parameters: list[Parameter] = []
    request_body: RequestBody | None = Field(default=None, alias="requestBody")
    responses: dict[str, Response] = {}


class PathItem(BaseModel):
    """Operations defined under one path, keyed by lowercase method."""

    operations: dict[str, Operation] = {}
    parameters: list[Parameter] = []


class Components(BaseModel):
    schemas: dict[str, JsonSchema] = {}


class OpenApiDocument(BaseModel):
    """Root of a parsed OpenAPI document."""

    paths: dict[str, PathItem]
    components: Components = Components()


class RenderedRequest(BaseModel):
    """The request file generated for a single path."""

    path: str
    filename: str
    content: str


JsonSchema.model_rebuild()
