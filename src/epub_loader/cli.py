"""Command-line inspection of parsed EPUB files."""

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

from epub_loader.core.epub_parser import EpubParser
from epub_loader.core.errors import EpubError
from epub_loader.models.epub import NavPoint, ParsedEpub, guess_media_type

app = typer.Typer(
    name="epub-loader",
    help="Inspect the structure of EPUB files.",
    add_completion=False,
)

console = Console()

BookPath = Annotated[
    Path,
    typer.Argument(
        help="Path to the EPUB file",
        exists=True,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
    ),
]


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show parser log output"),
    ] = False,
) -> None:
    """Inspect the structure of EPUB files."""
    if verbose:
        logging.basicConfig(
            level=logging.INFO,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )


def load_book(book_path: Path) -> ParsedEpub:
    """Parse a book, turning fatal errors into a clean exit."""
    try:
        return EpubParser.from_path(book_path).parse()
    except EpubError as e:
        console.print(f"[red]Error reading file: {e.message}[/]")
        raise typer.Exit(1)


@app.command()
def info(book_path: BookPath) -> None:
    """Display book metadata and package summary."""
    parsed = load_book(book_path)
    meta = parsed.metadata

    info_lines = [
        f"[bold]{meta.title or 'Unknown Title'}[/]",
        "",
        f"[dim]Author:[/] {meta.creator or 'Unknown'}",
        f"[dim]Language:[/] {meta.language or 'Unknown'}",
        f"[dim]Publisher:[/] {meta.publisher or 'Unknown'}",
        f"[dim]Identifier:[/] {meta.identifier or 'Unknown'}",
        f"[dim]Published:[/] {meta.published or 'Unknown'}",
    ]
    if meta.modified:
        info_lines.append(f"[dim]Modified:[/] {meta.modified}")

    info_lines.extend(
        [
            "",
            f"[dim]Package directory:[/] {parsed.base_path or '(root)'}",
            f"[dim]Manifest items:[/] {len(parsed.manifest)}",
            f"[dim]Spine entries:[/] {len(parsed.spine.items)}",
            f"[dim]Chapters:[/] {len(parsed.content)}",
            f"[dim]Cover:[/] {parsed.cover_path or 'None'}",
        ]
    )

    if parsed.warnings:
        info_lines.append("")
        for warning in parsed.warnings:
            info_lines.append(f"[yellow]! {warning}[/]")

    console.print()
    console.print(Panel("\n".join(info_lines), title="Book Information", border_style="green"))
    console.print()


def _add_nav_points(parent: Tree, points: tuple[NavPoint, ...]) -> None:
    for point in points:
        branch = parent.add(f"{point.label} [dim]{point.href}[/]")
        _add_nav_points(branch, point.children)


@app.command()
def toc(book_path: BookPath) -> None:
    """Display the table of contents."""
    parsed = load_book(book_path)
    tree = Tree(f"[bold cyan]{parsed.metadata.title or book_path.name}[/]")

    if parsed.nav_points:
        _add_nav_points(tree, parsed.nav_points)
    else:
        # No NCX: fall back to reading order
        for item in parsed.spine_items():
            tree.add(f"{item.id} [dim]{item.href}[/]")

    console.print(tree)


@app.command()
def spine(book_path: BookPath) -> None:
    """Display the reading order."""
    parsed = load_book(book_path)

    table = Table(title="Reading Order", show_header=True, header_style="bold cyan")
    table.add_column("#", style="dim", width=4)
    table.add_column("Id", style="white")
    table.add_column("Path", style="white")
    table.add_column("Type", style="dim")
    table.add_column("Chars", justify="right", style="green")

    for index, item_id in enumerate(parsed.spine.items):
        item = parsed.manifest.get(item_id)
        if item is None:
            table.add_row(str(index + 1), item_id, "[red]missing[/]", "", "")
            continue
        chapter = parsed.chapter(item_id)
        chars = f"{len(chapter):,}" if chapter is not None else "-"
        table.add_row(str(index + 1), item_id, item.href, item.media_type, chars)

    console.print(table)


@app.command()
def resources(book_path: BookPath) -> None:
    """List extracted image resources."""
    parsed = load_book(book_path)

    table = Table(title="Resources", show_header=True, header_style="bold cyan")
    table.add_column("Key", style="white")
    table.add_column("Type", style="dim")
    table.add_column("Bytes", justify="right", style="green")

    for key, data in parsed.resources.items():
        if "/" not in key and any(path.endswith("/" + key) for path in parsed.resources):
            # File-name alias of a path already listed
            continue
        table.add_row(key, guess_media_type(key), f"{len(data):,}")

    console.print(table)


if __name__ == "__main__":
    app()
