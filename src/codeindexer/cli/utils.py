"""CLI utilities."""

import json
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import click

from codeindexer.config.models import CodeIndexerConfig
from codeindexer.core.errors import CodeIndexerError
from codeindexer.index.ops import CodeIndex


def emit(record: dict[str, Any]) -> None:
    """Write one JSON object per line to stdout."""
    click.echo(json.dumps(record))


@contextmanager
def open_code_index(ctx: click.Context) -> Iterator[CodeIndex]:
    """Open the CodeIndex for the invocation's root and configuration.

    Raises:
        click.ClickException: If the index cannot be opened or an index
            operation fails inside the block.
    """
    root: Path = ctx.obj["root"]
    config: CodeIndexerConfig = ctx.obj["config"]
    try:
        with CodeIndex.from_root(root, config) as code_index:
            yield code_index
    except CodeIndexerError as e:
        raise click.ClickException(str(e)) from e
