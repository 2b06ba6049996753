"""Search and query CLI commands."""

import click
import msgspec
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from sitesearch.exceptions import SiteSearchError
from sitesearch.search import (
    CommandPalette,
    SearchService,
    fuzzy_search,
    load_commands,
)

HIGHLIGHT_STYLE = "bold yellow"


def _fail(ctx: click.Context, error: Exception) -> None:
    if ctx.obj.debug:
        raise error
    ctx.obj.console.print(f"[red]Error:[/red] {escape(str(error))}", soft_wrap=True)
    ctx.exit(1)


def _manifest_path(ctx: click.Context, manifest: str | None, required: bool = True):
    path = manifest or ctx.obj.settings.manifest
    if not path and required:
        raise click.UsageError(
            "No manifest given. Pass --manifest or set 'manifest' in the config."
        )
    return path


def get_search_service(ctx: click.Context, manifest: str | None) -> SearchService:
    """Build a search service loaded from the manifest."""
    service = SearchService(settings=ctx.obj.settings)
    path = _manifest_path(ctx, manifest)
    service.load_manifest(path)
    return service


def _marked_text(value: str, markers: tuple[str, str]) -> Text:
    """Convert marker-wrapped text into styled Rich text."""
    open_mark, close_mark = markers
    text = Text()
    if not open_mark or not close_mark:
        text.append(value)
        return text

    while value:
        start = value.find(open_mark)
        if start < 0:
            text.append(value)
            break
        end = value.find(close_mark, start + len(open_mark))
        if end < 0:
            text.append(value)
            break
        text.append(value[:start])
        text.append(value[start + len(open_mark) : end], style=HIGHLIGHT_STYLE)
        value = value[end + len(close_mark) :]

    return text


def _indexed_text(value: str, indices: list[int]) -> Text:
    text = Text(value)
    for i in indices:
        text.stylize(HIGHLIGHT_STYLE, i, i + 1)
    return text


def _echo_json(data) -> None:
    click.echo(msgspec.json.format(msgspec.json.encode(data)).decode())


manifest_option = click.option(
    "--manifest",
    "-m",
    type=click.Path(dir_okay=False),
    help="Search manifest JSON (default: from config)",
)


@click.command()
@click.argument("query", required=True)
@manifest_option
@click.option("--limit", "-n", type=click.IntRange(min=1), help="Maximum results to show")
@click.option("--threshold", type=float, help="Minimum BM25 score")
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format",
)
@click.option("--no-highlight", is_flag=True, help="Disable result highlighting")
@click.pass_context
def search(
    ctx: click.Context,
    query: str,
    manifest: str | None,
    limit: int | None,
    threshold: float | None,
    output_format: str,
    no_highlight: bool,
) -> None:
    """Search site pages with BM25 ranking."""
    console = ctx.obj.console

    try:
        service = get_search_service(ctx, manifest)
        results = service.search(
            query, limit=limit, threshold=threshold, highlight=not no_highlight
        )
    except SiteSearchError as e:
        _fail(ctx, e)
        return

    if output_format == "json":
        _echo_json(
            [
                {
                    "id": r.doc_id,
                    "score": r.score,
                    "title": r.title,
                    "url": r.url,
                    "snippet": r.snippet,
                }
                for r in results
            ]
        )
        return

    if not results:
        console.print(f"\n[yellow]No results found for '{escape(query)}'[/yellow]")
        corrections = service.corrections(query)
        if corrections:
            console.print(f"Did you mean: [cyan]{escape(', '.join(corrections))}[/cyan]?")
        return

    noun = "result" if len(results) == 1 else "results"
    console.print(f"\nFound [green]{len(results)}[/green] {noun}")

    markers = ctx.obj.settings.fuzzy.highlight_markers
    table = Table()
    table.add_column("ID", style="cyan")
    table.add_column("Title", overflow="ellipsis", max_width=40)
    table.add_column("Snippet", overflow="fold")
    table.add_column("Score", justify="right")

    for result in results:
        table.add_row(
            str(result.doc_id),
            _marked_text(result.title, markers),
            _marked_text(result.snippet, markers),
            f"{result.score:.3f}",
        )

    console.print(table)


@click.command()
@click.argument("partial", required=True)
@manifest_option
@click.option("--limit", "-n", type=click.IntRange(min=1), default=5, help="Maximum suggestions")
@click.pass_context
def suggest(ctx: click.Context, partial: str, manifest: str | None, limit: int) -> None:
    """Suggest query completions from indexed terms."""
    console = ctx.obj.console

    try:
        service = get_search_service(ctx, manifest)
        suggestions = service.suggest(partial, limit=limit)
    except SiteSearchError as e:
        _fail(ctx, e)
        return

    if not suggestions:
        console.print(f"[yellow]No suggestions for '{escape(partial)}'[/yellow]")
        return

    for suggestion in suggestions:
        console.print(escape(suggestion), highlight=False)


@click.command()
@click.argument("query", required=True)
@click.argument("candidates", nargs=-1, required=True)
@click.option("--limit", "-n", type=click.IntRange(min=1), help="Maximum matches to show")
@click.option("--threshold", type=click.FloatRange(0, 1), help="Minimum match score")
@click.option("--case-sensitive", is_flag=True, help="Match case exactly")
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format",
)
@click.pass_context
def match(
    ctx: click.Context,
    query: str,
    candidates: tuple[str, ...],
    limit: int | None,
    threshold: float | None,
    case_sensitive: bool,
    output_format: str,
) -> None:
    """Fuzzy-match QUERY against each CANDIDATE string."""
    console = ctx.obj.console
    options = ctx.obj.settings.fuzzy.match_options()
    if threshold is not None:
        options["threshold"] = threshold
    if case_sensitive:
        options["case_sensitive"] = True

    matches = fuzzy_search(query, list(candidates), limit=limit, **options)

    if output_format == "json":
        _echo_json(
            [
                {
                    "item": m.item,
                    "score": m.score,
                    "matches": m.matches,
                    "highlighted": m.highlighted,
                }
                for m in matches
            ]
        )
        return

    if not matches:
        console.print(f"[yellow]No matches for '{escape(query)}'[/yellow]")
        return

    table = Table()
    table.add_column("Candidate")
    table.add_column("Score", justify="right")
    for m in matches:
        table.add_row(_indexed_text(m.item, m.matches), f"{m.score:.3f}")

    console.print(table)


@click.command()
@click.argument("query", default="")
@manifest_option
@click.option(
    "--commands",
    "commands_file",
    type=click.Path(exists=True, dir_okay=False),
    help="YAML file listing palette commands",
)
@click.option("--limit", "-n", type=click.IntRange(min=1), help="Maximum items to show")
@click.pass_context
def palette(
    ctx: click.Context,
    query: str,
    manifest: str | None,
    commands_file: str | None,
    limit: int | None,
) -> None:
    """Search palette commands and site pages together."""
    console = ctx.obj.console

    try:
        service = SearchService(settings=ctx.obj.settings)
        path = _manifest_path(ctx, manifest, required=False)
        if path:
            service.load_manifest(path)
        commands = load_commands(commands_file) if commands_file else []
        items = CommandPalette(commands, service=service).search(query, limit=limit)
    except SiteSearchError as e:
        _fail(ctx, e)
        return

    if not items:
        console.print(f"[yellow]Nothing matches '{escape(query)}'[/yellow]")
        return

    markers = ctx.obj.settings.fuzzy.highlight_markers
    table = Table()
    table.add_column("Kind", style="dim")
    table.add_column("ID", style="cyan")
    table.add_column("Label", overflow="ellipsis", max_width=50)
    table.add_column("Score", justify="right")
    for item in items:
        table.add_row(
            item.kind.value,
            item.id,
            _marked_text(item.highlighted, markers),
            f"{item.score:.3f}",
        )

    console.print(table)


@click.command()
@manifest_option
@click.pass_context
def stats(ctx: click.Context, manifest: str | None) -> None:
    """Show index statistics for the manifest."""
    console = ctx.obj.console

    try:
        service = get_search_service(ctx, manifest)
        statistics = service.statistics()
    except SiteSearchError as e:
        _fail(ctx, e)
        return

    table = Table(title="Index Statistics")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Documents", str(statistics["total_documents"]))
    table.add_row("Terms", str(statistics["total_terms"]))
    table.add_row("Postings", str(statistics["total_postings"]))
    for field, length in statistics["average_field_lengths"].items():
        table.add_row(f"Avg length: {field}", f"{length:.2f}")

    console.print(table)
