"""codeindexer show command - print one full element."""

from pathlib import Path

import click

from codeindexer.cli.utils import emit
from codeindexer.config.loader import get_index_path
from codeindexer.core.errors import CodeIndexerError
from codeindexer.index.models import element_to_dict
from codeindexer.index.ops import CodeIndex
from codeindexer.index.sources import read_element_stream


@click.command()
@click.argument("elements", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("element_id")
@click.pass_context
def show_command(ctx: click.Context, elements: Path, element_id: str) -> None:
    """Print the full element ELEMENT_ID as stored in ELEMENTS.

    Full elements live in the in-memory store, not in the search index,
    so they are loaded from the element stream. The index is not opened.
    """
    try:
        loaded = read_element_stream(elements)
    except CodeIndexerError as e:
        raise click.ClickException(str(e)) from e

    config = ctx.obj["config"]
    code_index = CodeIndex(get_index_path(ctx.obj["root"], config), config)
    code_index.store.add_all(loaded.elements)

    element = code_index.get_element_by_id(element_id)
    if element is None:
        raise click.ClickException(f"No element with id '{element_id}' in {elements}")
    emit(element_to_dict(element))
