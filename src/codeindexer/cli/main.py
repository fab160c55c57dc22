"""codeindexer CLI - codeindexer command."""

from pathlib import Path

import click

from codeindexer.cli.build import build_command
from codeindexer.cli.search import search_command
from codeindexer.cli.show import show_command
from codeindexer.cli.stats import stats_command
from codeindexer.config.loader import load_config
from codeindexer.core.errors import ConfigError
from codeindexer.core.logging import configure_logging, set_request_id


@click.group()
@click.version_option(version="0.1.0", prog_name="codeindexer")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option(
    "--root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
    help="Directory holding .codeindexer/ (default: current directory)",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, root: Path) -> None:
    """codeindexer - Structural element index for codebases."""
    root = root.resolve()
    try:
        config = load_config(root)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    logging_config = config.logging
    if verbose:
        logging_config = logging_config.model_copy(update={"level": "DEBUG"})
    configure_logging(config=logging_config)
    set_request_id()

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["root"] = root
    ctx.obj["config"] = config


cli.add_command(build_command, name="build")
cli.add_command(search_command, name="search")
cli.add_command(show_command, name="show")
cli.add_command(stats_command, name="stats")


if __name__ == "__main__":
    cli()
