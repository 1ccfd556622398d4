"""CLI entry point for swaggerdoc."""

import json
import logging
from pathlib import Path

import click
import yaml

from swaggerdoc.config import SwaggerDocConfig, load_config
from swaggerdoc.errors import SwaggerDocError
from swaggerdoc.generator.document import DocumentBuilder


class _NoAliasDumper(yaml.SafeDumper):
    def ignore_aliases(self, data):
        return True


def _load(config_path: Path | None, root: Path | None) -> SwaggerDocConfig:
    """Read the config file, if any, and point the scan at ``root`` when given."""
    config = load_config(config_path) if config_path else SwaggerDocConfig()
    if root is not None:
        config.dir_scanner = str(root.resolve())
    return config


def _dump(document: dict, fmt: str) -> str:
    if fmt == "json":
        return json.dumps(document, indent=2, ensure_ascii=False) + "\n"
    return yaml.dump(document, Dumper=_NoAliasDumper, sort_keys=False, allow_unicode=True)


def _build(config: SwaggerDocConfig) -> DocumentBuilder:
    builder = DocumentBuilder(config)
    try:
        builder.document()
    except SwaggerDocError as e:
        raise click.ClickException(str(e)) from e
    return builder


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log debug output.")
def main(verbose: bool):
    """swaggerdoc: generate an OpenAPI document from handler annotations."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument("root", required=False, type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("-c", "--config", "config_path", type=click.Path(exists=True, dir_okay=False, path_type=Path), help="YAML config file.")
@click.option("-o", "--output", type=click.Path(path_type=Path), help="Output file. Prints to stdout when omitted.")
@click.option("--format", "fmt", default=None, type=click.Choice(["json", "yaml"]), help="Output format, guessed from the output suffix by default.")
def build(root: Path | None, config_path: Path | None, output: Path | None, fmt: str | None):
    """Scan ROOT (or the configured directory) and write the OpenAPI document."""
    config = _load(config_path, root)
    if fmt is None:
        fmt = "yaml" if output is not None and output.suffix in (".yaml", ".yml") else "json"

    click.echo(f"Scanning {config.scan_root}...", err=True)
    document = _build(config).document()
    text = _dump(document, fmt)

    if output is None:
        click.echo(text, nl=False)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    click.echo(f"Found {len(document['paths'])} paths. Document saved to {output}", err=True)


@main.command()
@click.argument("root", required=False, type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("-c", "--config", "config_path", type=click.Path(exists=True, dir_okay=False, path_type=Path), help="YAML config file.")
def routes(root: Path | None, config_path: Path | None):
    """Print the route to handler binding table."""
    config = _load(config_path, root)
    builder = _build(config)
    for route in builder.routes():
        handler = str(route.handler) if route.handler else "<unbound>"
        rule = f" [{route.rule_name}]" if route.rule_name else ""
        click.echo(f"{route.method.upper()} {route.route} -> {handler}{rule}")
