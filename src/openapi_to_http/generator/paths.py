"""Path translator — groups the operations of each path into one request file."""

import logging
import re

from openapi_to_http.config import GeneratorConfig
from openapi_to_http.errors import FilenameCollisionError
from openapi_to_http.parser.base import OpenApiDocument, RenderedRequest

from .operation import render_operation

logger = logging.getLogger(__name__)

EXTENSION = ".http"
UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def render_document(document: OpenApiDocument, config: GeneratorConfig | None = None) -> dict[str, str]:
    """Render every path of the document.

    Returns a dict of {filename: content} in path declaration order.
    """
    return {r.filename: r.content for r in render_requests(document, config)}


def render_requests(document: OpenApiDocument, config: GeneratorConfig | None = None) -> list[RenderedRequest]:
    """Render one RenderedRequest per path that defines at least one operation."""
    config = config or GeneratorConfig()
    components = document.components.schemas
    rendered = []
    taken: set[str] = set()

    for path, item in document.paths.items():
        if not item.operations:
            logger.debug("Skipping %s: no operations", path)
            continue

        blocks = [
            render_operation(method, path, operation, components, config, item.parameters)
            for method, operation in item.operations.items()
        ]
        filename = _claim_filename(
            derive_filename(path, config.layout, config.default_filename), path, taken, config
        )
        rendered.append(RenderedRequest(path=path, filename=filename, content="\n\n".join(blocks)))

    return rendered


def derive_filename(path: str, layout: str = "flat", default_name: str = "index") -> str:
    """Derive the output filename of a path.

    Template segments like `{id}` are skipped. The flat layout keeps the
    last remaining segment, the nested layout keeps all of them as folders.

        >>> derive_filename("/v2/customers/{id}")
        'customers.http'
        >>> derive_filename("/v2/customers/{id}", layout="nested")
        'v2/customers.http'
    """
    segments = [
        UNSAFE_CHARS.sub("_", s)
        for s in path.split("/")
        if s and not _is_template(s)
    ]
    # "." and ".." would escape the output folder
    segments = [s for s in segments if s.strip(".")]
    if not segments:
        return default_name + EXTENSION
    if layout == "nested":
        return "/".join(segments) + EXTENSION
    return segments[-1] + EXTENSION


def _claim_filename(filename: str, path: str, taken: set[str], config: GeneratorConfig) -> str:
    """Reserve filename, adding a numeric suffix when an earlier path already holds it.

    Names are compared case-insensitively; `taken` holds lowercased names.
    """
    if filename.lower() not in taken:
        taken.add(filename.lower())
        return filename

    message = f"{path} derives {filename}, already used by another path"
    if config.strict:
        raise FilenameCollisionError(message)

    stem = filename[: -len(EXTENSION)]
    counter = 2
    while f"{stem}_{counter}{EXTENSION}".lower() in taken:
        counter += 1
    resolved = f"{stem}_{counter}{EXTENSION}"
    logger.warning("%s; writing %s instead", message, resolved)
    taken.add(resolved.lower())
    return resolved


def _is_template(segment: str) -> bool:
    return segment.startswith("{") and "}" in segment
