"""CLI entry point for openapi-to-http."""

import logging
from pathlib import Path

import click

from openapi_to_http.config import DEFAULT_HOST_VARIABLE, GeneratorConfig
from openapi_to_http.emitter import clear_directory, is_empty_dir, write_documents
from openapi_to_http.errors import OpenApiToHttpError
from openapi_to_http.generator.paths import render_document
from openapi_to_http.parser.openapi import load_openapi


@click.command()
@click.option("-s", "--schema", "schema_path", required=True, type=click.Path(exists=True, dir_okay=False, path_type=Path), help="OpenAPI document (JSON or YAML).")
@click.option("-o", "--output", required=True, type=click.Path(file_okay=False, path_type=Path), help="Output directory for .http files.")
@click.option("--layout", default="flat", type=click.Choice(["flat", "nested"]), help="Put every file in the output folder, or mirror the path hierarchy.")
@click.option("--host-variable", default=DEFAULT_HOST_VARIABLE, envvar="OPENAPI_TO_HTTP_HOST_VARIABLE", show_default=True, help="Variable used in the host header.")
@click.option("--no-parameters", is_flag=True, help="Do not document query and path parameters.")
@click.option("--strict", is_flag=True, help="Fail on malformed schemas, non-JSON bodies and filename collisions.")
@click.option("-y", "--yes", is_flag=True, help="Clear a non-empty output folder without asking.")
@click.option("-v", "--verbose", is_flag=True, help="Log progress details.")
def main(
    schema_path: Path,
    output: Path,
    layout: str,
    host_variable: str,
    no_parameters: bool,
    strict: bool,
    yes: bool,
    verbose: bool,
):
    """Generate one .http request file per path of an OpenAPI document."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    config = GeneratorConfig(
        host_variable=host_variable,
        layout=layout,
        include_parameters=not no_parameters,
        strict=strict,
    )

    click.echo(f"Parsing {schema_path}...")
    try:
        document = load_openapi(schema_path)
        click.echo(f"Found {len(document.paths)} paths.")
        files = render_document(document, config)
    except OpenApiToHttpError as e:
        raise click.ClickException(str(e)) from e

    if not is_empty_dir(output):
        if not yes:
            click.confirm(f"Output folder {output} is not empty. Delete its contents?", abort=True)
        clear_directory(output)

    try:
        written = write_documents(files, output)
    except OpenApiToHttpError as e:
        raise click.ClickException(str(e)) from e

    for file_path in written:
        click.echo(f"  Created {file_path}")
    click.echo(f"Generated {len(written)} files in {output}")
