"""codeindexer build command - rebuild the index from an element stream."""

from pathlib import Path

import click

from codeindexer.cli.utils import emit, open_code_index
from codeindexer.core.errors import CodeIndexerError
from codeindexer.index.sources import read_element_stream


@click.command()
@click.argument("elements", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def build_command(ctx: click.Context, elements: Path) -> None:
    """Replace the index contents with the elements in ELEMENTS.

    ELEMENTS is a JSON Lines file with one element record per line.
    Malformed records are skipped and counted.
    """
    try:
        loaded = read_element_stream(elements)
    except CodeIndexerError as e:
        raise click.ClickException(str(e)) from e

    with open_code_index(ctx) as code_index:
        count = code_index.build_index(loaded.elements)
        emit(
            {
                "indexed": count,
                "skipped": loaded.skipped,
                "index_path": str(code_index.index_path),
            }
        )
