"""Command-line interface for optigraph."""

import asyncio
import json
import logging
from pathlib import Path

import click

from .core.models import GraphQLRequest
from .core.query import QueryDefinition
from .core.query_builder import QueryBuilder
from .core.schema import SchemaCache
from .core.settings import AuthenticationMode, ConfigurationError, GraphSettings
from .core.transport import GraphQLTransport


def load_settings(
    config: str | None,
    endpoint: str | None = None,
    auth_mode: str | None = None,
    single_key: str | None = None,
    app_key: str | None = None,
    secret: str | None = None,
) -> GraphSettings:
    """Resolve settings: config file (or environment), then command-line overrides."""
    settings = GraphSettings.from_file(config) if config else GraphSettings.from_env()
    overrides = {
        "endpoint": endpoint,
        "auth_mode": AuthenticationMode.parse(auth_mode) if auth_mode else None,
        "single_key": single_key,
        "app_key": app_key,
        "secret": secret,
    }
    return settings.model_copy(update={k: v for k, v in overrides.items() if v is not None})


def _read_text(path: str) -> str:
    return Path(path).read_text(encoding="utf-8")


def _make_transport(ctx: click.Context) -> GraphQLTransport:
    factory = ctx.obj.get("transport_factory", GraphQLTransport)
    return factory(ctx.obj["settings"])


@click.group()
@click.version_option(package_name="optigraph")
@click.option("--config", "-c", type=click.Path(exists=True), help="JSON settings file.")
@click.option("--endpoint", "-e", help="GraphQL endpoint URL.")
@click.option(
    "--auth-mode",
    type=click.Choice([m.value for m in AuthenticationMode], case_sensitive=False),
    help="Authentication mode.",
)
@click.option("--single-key", help="Single key for epi-single authentication.")
@click.option("--app-key", help="App key for HMAC authentication.")
@click.option("--secret", help="Secret for HMAC authentication.")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.pass_context
def main(ctx, config, endpoint, auth_mode, single_key, app_key, secret, verbose):
    """Query a GraphQL content graph.

    Settings not given on the command line are read from the --config file,
    or from OPTIGRAPH_* environment variables.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    try:
        ctx.obj["settings"] = load_settings(config, endpoint, auth_mode, single_key, app_key, secret)
    except ConfigurationError as e:
        raise click.UsageError(str(e)) from e
    ctx.obj["verbose"] = verbose


@main.command("test-connection")
@click.pass_context
def test_connection(ctx):
    """Check that the endpoint answers an introspection probe."""

    async def run():
        async with _make_transport(ctx) as transport:
            return await transport.test_connection()

    success, message = asyncio.run(run())
    click.echo(message)
    if not success:
        ctx.exit(1)


@main.command()
@click.option("--all", "show_all", is_flag=True, help="Include types that are not queryable.")
@click.pass_context
def schema(ctx, show_all: bool):
    """List the content types exposed by the schema.

    Examples:

        optigraph schema

        optigraph --endpoint https://cg.optimizely.com/content/v2 schema --all
    """

    async def run():
        async with _make_transport(ctx) as transport:
            return await SchemaCache(transport).get_schema_info()

    info = asyncio.run(run())
    if info is None:
        raise click.ClickException("Schema could not be loaded (run with --verbose for details).")

    types = info.content_types if show_all else info.queryable_content_types
    for content_type in types:
        marker = "*" if content_type.is_queryable else " "
        click.echo(f"{marker} {content_type.name} ({len(content_type.fields)} fields)")

    if ctx.obj["verbose"]:
        click.echo(f"Queryable root fields: {len(info.queryable_type_names)}")
        click.echo(f"Fetched at: {info.fetched_at.isoformat()}")


@main.command()
@click.argument("type_name")
@click.pass_context
def fields(ctx, type_name: str):
    """Show the fields of a content type and their filter operators."""

    async def run():
        async with _make_transport(ctx) as transport:
            return await SchemaCache(transport).get_content_type(type_name)

    content_type = asyncio.run(run())
    if content_type is None:
        raise click.ClickException(f"Unknown content type: {type_name}")

    for field_info in content_type.fields:
        flags = []
        if field_info.is_sortable:
            flags.append("sortable")
        if field_info.is_searchable:
            flags.append("searchable")
        suffix = f" [{', '.join(flags)}]" if flags else ""
        click.echo(f"{field_info.name}: {field_info.type}{suffix}")
        click.echo(f"    operators: {', '.join(field_info.available_operators)}")


@main.command()
@click.argument("definition", type=click.Path(exists=True))
@click.option("--format", "reformat", is_flag=True, help="Run the output through the formatter.")
def build(definition: str, reformat: bool):
    """Build query text from a JSON query definition.

    Examples:

        optigraph build ./article-query.json
    """
    try:
        query_definition = QueryDefinition.model_validate_json(_read_text(definition))
    except ValueError as e:
        raise click.ClickException(f"Invalid query definition: {e}") from e

    builder = QueryBuilder()
    text = builder.build(query_definition)
    click.echo(builder.format(text) if reformat else text.rstrip("\n"))


@main.command()
@click.argument("query_file", type=click.Path(exists=True))
@click.option("--strict", is_flag=True, help="Also run the GraphQL parser.")
@click.pass_context
def validate(ctx, query_file: str, strict: bool):
    """Check a query file for balanced braces and closed strings."""
    is_valid, errors = QueryBuilder().validate(_read_text(query_file), strict=strict)
    if is_valid:
        click.echo("Query is valid.")
        return
    for error in errors:
        click.echo(error, err=True)
    ctx.exit(1)


@main.command("format")
@click.argument("query_file", type=click.Path(exists=True))
def format_command(query_file: str):
    """Print a query file re-indented."""
    click.echo(QueryBuilder().format(_read_text(query_file)))


@main.command()
@click.argument("query_file", type=click.Path(exists=True))
@click.option("--variables", help="Query variables as a JSON object.")
@click.option("--show-request", is_flag=True, help="Print request/response diagnostics.")
@click.pass_context
def execute(ctx, query_file: str, variables: str | None, show_request: bool):
    """Execute a query file and print the JSON response."""
    try:
        parsed_variables = json.loads(variables) if variables else None
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"not valid JSON: {e}", param_hint="--variables") from e

    request = GraphQLRequest(query=_read_text(query_file), variables=parsed_variables)

    async def run():
        async with _make_transport(ctx) as transport:
            return await transport.execute(request), transport.last_request

    response, last_request = asyncio.run(run())

    if show_request and last_request is not None:
        click.echo(f"{last_request.method} {last_request.url}", err=True)
        for name, value in last_request.request_headers.items():
            click.echo(f"> {name}: {value}", err=True)
        click.echo(f"< {last_request.status_code} ({last_request.duration.total_seconds() * 1000:.0f} ms)", err=True)
        for name, value in last_request.response_headers.items():
            click.echo(f"< {name}: {value}", err=True)

    click.echo(response.model_dump_json(by_alias=True, exclude_none=True, indent=2))
    if response.has_errors:
        ctx.exit(1)


if __name__ == "__main__":
    main()
