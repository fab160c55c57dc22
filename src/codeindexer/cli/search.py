"""codeindexer search commands - query the index."""

import click

from codeindexer.cli.utils import emit, open_code_index
from codeindexer.index.models import ElementKind, ElementQuery, ElementSummary

_KIND_CHOICE = click.Choice([k.value for k in ElementKind])
_LIMIT_OPTION = click.option(
    "-n", "--limit", type=int, default=None, help="Maximum results (default from config)"
)


def _emit_all(summaries: list[ElementSummary]) -> None:
    for summary in summaries:
        emit(summary.to_dict())


@click.group()
def search_command() -> None:
    """Search indexed elements. Results are printed as JSON lines."""


@search_command.command("name")
@click.argument("pattern")
@_LIMIT_OPTION
@click.pass_context
def search_name(ctx: click.Context, pattern: str, limit: int | None) -> None:
    """Elements whose name starts with PATTERN (token-wise, case-insensitive)."""
    with open_code_index(ctx) as code_index:
        _emit_all(code_index.search_by_name_pattern(pattern, limit))


@search_command.command("fullname")
@click.argument("full_name")
@click.pass_context
def search_fullname(ctx: click.Context, full_name: str) -> None:
    """The element whose full name is exactly FULL_NAME."""
    with open_code_index(ctx) as code_index:
        summary = code_index.search_by_full_name(full_name)
    if summary is None:
        raise click.ClickException(f"No element named '{full_name}'")
    emit(summary.to_dict())


@search_command.command("kind")
@click.argument("kind", type=_KIND_CHOICE)
@_LIMIT_OPTION
@click.pass_context
def search_kind(ctx: click.Context, kind: str, limit: int | None) -> None:
    """Elements of KIND."""
    with open_code_index(ctx) as code_index:
        _emit_all(code_index.search_by_kind(ElementKind(kind), limit))


@search_command.command("parent")
@click.argument("parent_id")
@_LIMIT_OPTION
@click.pass_context
def search_parent(ctx: click.Context, parent_id: str, limit: int | None) -> None:
    """Direct children of PARENT_ID."""
    with open_code_index(ctx) as code_index:
        _emit_all(code_index.search_by_parent_id(parent_id, limit))


@search_command.command("advanced")
@click.option("--name", "name_pattern", default=None, help="Name prefix pattern")
@click.option("--kind", type=_KIND_CHOICE, default=None, help="Element kind")
@click.option("--access", "access_modifier", default=None, help="Access modifier, exact")
@click.option("--parent", "parent_id", default=None, help="Parent element id")
@click.option("--returns", "return_type", default=None, help="Member return type, exact")
@_LIMIT_OPTION
@click.pass_context
def search_advanced(
    ctx: click.Context,
    name_pattern: str | None,
    kind: str | None,
    access_modifier: str | None,
    parent_id: str | None,
    return_type: str | None,
    limit: int | None,
) -> None:
    """Elements matching every given filter. No filter matches nothing."""
    query = ElementQuery(
        name_pattern=name_pattern,
        kind=ElementKind(kind) if kind else None,
        access_modifier=access_modifier,
        parent_id=parent_id,
        return_type=return_type,
    )
    with open_code_index(ctx) as code_index:
        _emit_all(code_index.advanced_search(query, limit))
