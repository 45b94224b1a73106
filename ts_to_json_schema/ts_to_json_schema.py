import json
from pathlib import Path

import click

from .cli_utils import reconstruct_command_line
from .logging_config import setup_logging
from .pipeline import ConverterConfig, OutputFormat, SchemaConversionError, SchemaGenerator


@click.command()
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option("--name", "-n", "names", multiple=True, type=str, help="Only generate these declarations (repeatable)")
@click.option(
    "--format",
    "-f",
    "output_format",
    default=None,
    type=click.Choice([f.value for f in OutputFormat]),
    help="Output a single JSON document or a name/schema listing",
)
@click.option(
    "--fail-fast",
    is_flag=True,
    default=False,
    help="Stop at the first declaration that cannot be converted",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log every resolution step")
@click.argument("path", type=click.Path(exists=True, resolve_path=True))
@click.argument("output", required=False, default=None, type=click.Path(resolve_path=True))
def ts_to_json_schema(config, names, output_format, fail_fast, verbose, path, output):
    if verbose:
        setup_logging(level="DEBUG", force=True)

    if config is not None:
        with open(config) as f:
            config = ConverterConfig.from_dict(json.load(f))
    else:
        config = ConverterConfig()

    # CLI flags override the config file
    if output_format is not None:
        config.output_format = OutputFormat(output_format)
    if fail_fast:
        config.fail_fast = True

    source = Path(path).read_text(encoding="utf-8")

    try:
        generator = SchemaGenerator(
            source,
            config,
            names=list(names) or None,
            generation_comment=f"Generated by {reconstruct_command_line(ts_to_json_schema)}",
        )
        result = generator.generate()
    except SchemaConversionError as e:
        raise click.ClickException(str(e)) from e
    out = generator.render(result)

    if output is None:
        click.echo(out, nl=False)
    else:
        with open(output, "w") as f:
            f.write(out)

    for name, error in result.errors.items():
        click.echo(f"{name}: {error}", err=True)
    if not result.ok:
        raise SystemExit(1)


if __name__ == "__main__":
    ts_to_json_schema()
