"""Exceptions raised while loading, translating and writing documents."""


class OpenApiToHttpError(Exception):
    """Base class for all errors raised by openapi-to-http."""


class InputDecodingError(OpenApiToHttpError):
    """The schema file could not be decoded into a mapping."""


class DocumentStructureError(OpenApiToHttpError):
    """The decoded document does not have the shape of an OpenAPI document."""


class MissingPathsError(DocumentStructureError):
    """The document has no `paths` mapping."""


class MalformedSchemaError(OpenApiToHttpError):
    """A JSON Schema node has a missing or unrecognised type, or a dangling $ref."""


class UnsupportedMediaTypeError(OpenApiToHttpError):
    """A request body defines no application/json content."""


class FilenameCollisionError(OpenApiToHttpError):
    """Two paths derive the same output filename."""


class OutputExistsError(OpenApiToHttpError):
    """Writing a document would overwrite an existing file."""
