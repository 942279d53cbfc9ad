"""Command-line interface for gql-typegen."""

import logging
import shutil
import tarfile
import tempfile
import zipfile
from pathlib import Path

import click
from pydantic import ValidationError

from .core.config import GeneratorConfig
from .core.errors import GqlTypegenError
from .core.generator import CodeGenerator
from .core.hooks import AddHeaderHook, FilterTypesHook, HookRunner
from .core.parser import load_schema, parse_schema


def extract_archive(archive_path: Path) -> str:
    """Extract archive to temp directory. Returns path to extracted content."""
    temp_dir = tempfile.mkdtemp()
    if archive_path.suffix == ".zip":
        with zipfile.ZipFile(archive_path, "r") as zip_ref:
            zip_ref.extractall(temp_dir)
    elif archive_path.name.endswith((".tar.gz", ".tgz")):
        with tarfile.open(archive_path, "r:gz") as tar_ref:
            tar_ref.extractall(temp_dir)
    else:
        shutil.rmtree(temp_dir)
        raise click.BadParameter(f"Unsupported archive format: {archive_path.suffix}")
    return temp_dir


def is_archive(path: Path) -> bool:
    return path.is_file() and path.name.lower().endswith((".zip", ".tar.gz", ".tgz"))


def parse_scalar_options(values: tuple[str, ...]) -> dict[str, str]:
    """Parse repeated ``--scalar Name=python.path.Type`` options."""
    mappings = {}
    for value in values:
        name, sep, target = value.partition("=")
        if not sep or not name or not target:
            raise click.BadParameter(
                f"expected GraphQLName=python.path.Type, got {value!r}", param_hint="--scalar"
            )
        mappings[name.strip()] = target.strip()
    return mappings


def configure_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@click.group()
@click.version_option(package_name="gql-typegen")
def main():
    """Typed GraphQL client generator for Python.

    Generate value types, inputs, enums, selectors and operation
    builders from GraphQL schemas.
    """
    pass


@main.command()
@click.option(
    "--schema",
    "-s",
    required=True,
    type=click.Path(exists=True),
    help="Path to GraphQL schema file, directory, introspection JSON, or archive (.zip, .tar.gz, .tgz).",
)
@click.option(
    "--namespace",
    "-n",
    required=True,
    help="Root package of the generated code, e.g. myapi.client.",
)
@click.option(
    "--output",
    "-o",
    required=True,
    type=click.Path(),
    help="Directory the namespace package is written under.",
)
@click.option(
    "--scalar",
    "scalars",
    multiple=True,
    metavar="NAME=TYPE",
    help="Map a custom scalar to a Python type, e.g. Money=decimal.Decimal. Repeatable.",
)
@click.option(
    "--no-input-builders",
    is_flag=True,
    help="Do not generate builder classes for input types.",
)
@click.option(
    "--template-dir",
    type=click.Path(exists=True, file_okay=False),
    help="Directory of Jinja2 templates overriding the built-in ones.",
)
@click.option(
    "--header",
    help="Header text prepended to every generated module.",
)
@click.option(
    "--exclude-prefix",
    help="Skip types whose name starts with this prefix.",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output.",
)
def generate(
    schema: str,
    namespace: str,
    output: str,
    scalars: tuple[str, ...],
    no_input_builders: bool,
    template_dir: str | None,
    header: str | None,
    exclude_prefix: str | None,
    verbose: bool,
):
    """Generate a typed client package from a GraphQL schema.

    Examples:

        gql-typegen generate --schema ./schema.graphql --namespace myapi --output ./src

        gql-typegen generate -s ./schema -n myapi.client -o ./src --scalar Money=decimal.Decimal

        gql-typegen generate -s ./schema.tgz -n myapi -o ./src --no-input-builders
    """
    configure_logging(verbose)
    schema_path = Path(schema).resolve()
    output_path = Path(output).resolve()
    temp_dir = None

    try:
        config = GeneratorConfig(
            namespace=namespace,
            output_directory=output_path,
            scalar_mappings=parse_scalar_options(scalars),
            generate_input_builders=not no_input_builders,
            template_dir=Path(template_dir) if template_dir else None,
        )
    except ValidationError as e:
        raise click.UsageError(str(e)) from e

    hooks = HookRunner()
    if exclude_prefix:
        hooks.add_pre_hook(FilterTypesHook(exclude_prefix=exclude_prefix))
    if header:
        hooks.add_post_hook(AddHeaderHook(header))

    try:
        # Handle archives
        actual_schema_path = schema_path
        if is_archive(schema_path):
            click.echo(f"Extracting archive {schema_path.name}...")
            temp_dir = extract_archive(schema_path)
            actual_schema_path = Path(temp_dir)
            if verbose:
                click.echo(f"  Extracted to: {temp_dir}")

        if verbose:
            click.echo(f"Schema: {actual_schema_path}")
            click.echo(f"Output: {output_path}")

        click.echo("Parsing schema...")
        registry = parse_schema(load_schema(actual_schema_path), schema_path.name)

        if verbose:
            click.echo(f"  Types: {len(registry.object_types)}")
            click.echo(f"  Inputs: {len(registry.input_types)}")
            click.echo(f"  Enums: {len(registry.enums)}")
            click.echo(f"  Scalars: {len(registry.scalars)}")

        click.echo("Generating code...")
        generator = CodeGenerator(config, hooks)
        artifacts = generator.generate_artifacts(registry)
        files_written = generator.write(artifacts)

        click.echo(f"Done! Generated {len(artifacts)} artifacts in {output_path}")
        if verbose:
            click.echo(f"  Files written: {files_written}")
    except GqlTypegenError as e:
        raise click.ClickException(str(e)) from e
    finally:
        # Clean up temp directory
        if temp_dir:
            shutil.rmtree(temp_dir)


@main.command()
@click.option(
    "--schema",
    "-s",
    required=True,
    type=click.Path(exists=True),
    help="Path to GraphQL schema file, directory, or introspection JSON.",
)
def inspect(schema: str):
    """Summarize the definitions found in a schema.

    Lists object types, inputs, enums and root operations without
    generating anything.
    """
    try:
        registry = parse_schema(load_schema(schema), Path(schema).name)
    except GqlTypegenError as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"Types ({len(registry.object_types)}):")
    for object_type in registry.object_types:
        kind = "interface" if object_type.is_interface else "type"
        click.echo(f"  {kind} {object_type.name} ({len(object_type.fields)} fields)")
    click.echo(f"Inputs ({len(registry.input_types)}):")
    for input_type in registry.input_types:
        click.echo(f"  input {input_type.name} ({len(input_type.fields)} fields)")
    click.echo(f"Enums ({len(registry.enums)}):")
    for enum in registry.enums:
        click.echo(f"  enum {enum.name} ({len(enum.values)} values)")
    for label, root in (("Queries", registry.query_type), ("Mutations", registry.mutation_type)):
        fields = root.fields if root else ()
        click.echo(f"{label} ({len(fields)}):")
        for field in fields:
            arguments = ", ".join(f"{a.name}: {a.type}" for a in field.arguments)
            click.echo(f"  {field.name}({arguments}): {field.type}")


if __name__ == "__main__":
    main()
