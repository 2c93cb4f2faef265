"""CLI entry point for validator-to-swagger."""

from pathlib import Path

import click
import yaml

from validator_swagger.config import DEFAULT_ENVIRONMENT, ENVIRONMENT_VARIABLE, GeneratorConfig
from validator_swagger.generator.document import apply_overrides, load_header, write_document
from validator_swagger.generator.mapper import apply_validators
from validator_swagger.validator.loader import load_validators


@click.command(
    epilog="Example: validator-to-swagger -r -v ./validators -h ./header.json -o ./swagger.json",
)
@click.option("-v", "--validator", "validator_path", required=True, type=click.Path(path_type=Path), help="Location of validator file or directory of the folder.")
@click.option("-o", "--output", required=True, type=click.Path(dir_okay=False, path_type=Path), help="Location of the output file.")
@click.option("-h", "--header", "header_path", required=True, type=click.Path(path_type=Path), help="Location of the header file in JSON (or YAML) format.")
@click.option("-r", "--recursive", is_flag=True, help="Recursively search the validator directory for *_validator files.")
@click.option("-b", "--base-url", default=None, help="Override base url.")
@click.option("-m", "--map-path", default=None, help="Override redirect path (basePath).")
@click.option("-g", "--api-gateway-path", default=None, help="Api Gateway base path.")
@click.option("--env", "environment", envvar=ENVIRONMENT_VARIABLE, default=DEFAULT_ENVIRONMENT, show_default=True, help="Environment name shown in the description banner.")
def main(
    validator_path: Path,
    output: Path,
    header_path: Path,
    recursive: bool,
    base_url: str | None,
    map_path: str | None,
    api_gateway_path: str | None,
    environment: str,
):
    """Merge endpoint validators into a Swagger document."""
    config = GeneratorConfig(
        environment=environment,
        api_gateway_path=api_gateway_path,
        base_url=base_url,
        map_path=map_path,
    )

    try:
        click.echo(f"Loading validators from {validator_path}...")
        endpoints = load_validators(validator_path, recursive=recursive)
        click.echo(f"Found {len(endpoints)} endpoints.")
        document = load_header(header_path)
        apply_overrides(document, config)
        apply_validators(document, endpoints, config)
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        raise click.ClickException(str(e))

    output = output.resolve()
    try:
        write_document(document, output)
    except OSError as e:
        raise click.ClickException(f"Failed to write {output}: {e}")
    click.echo(f"Successfully added: {output}")
