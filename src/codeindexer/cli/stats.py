"""codeindexer stats command - show index statistics."""

import click

from codeindexer.cli.utils import emit, open_code_index


@click.command()
@click.pass_context
def stats_command(ctx: click.Context) -> None:
    """Show the index location and document count."""
    with open_code_index(ctx) as code_index:
        emit(
            {
                "index_path": str(code_index.index_path),
                "documents": code_index.search_index.doc_count(),
            }
        )
