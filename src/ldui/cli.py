"""
CLI for LDUI.

Commands:
- latest: List the latest topics
- topic: Show a post with inline image markers
- view: Preview one image of a post
- images: Inspect image extraction and placement for a markup file
- info: Show configuration and cache status
"""

import asyncio
from pathlib import Path

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table
from rich.text import Text

from .config import settings
from .logging import setup_logging

app = typer.Typer(
    name="ldui",
    help="Terminal client for Discourse forums with inline images",
)
console = Console()


def _build_cache():
    from .images import ImageCache, ImageFetcher

    fetcher = ImageFetcher(
        base_url=settings.discourse_url,
        timeout=settings.image_fetch_timeout,
    )
    return ImageCache(cache_dir=settings.image_path, fetcher=fetcher)


def _build_client():
    from .discourse import create_client

    return create_client(
        base_url=settings.discourse_url,
        api_key=settings.api_key,
        api_username=settings.api_username,
        timeout=settings.image_fetch_timeout,
    )


async def _load_post(topic_id: int, page: int, post_index: int):
    """Load a topic page, fetch every image on it and focus one post."""
    from .viewer import PostViewer

    client = _build_client()
    posts = await client.get_topic_posts(topic_id, page)
    if not 0 <= post_index < len(posts):
        console.print(f"[red]Post index {post_index} out of range (0-{len(posts) - 1})[/]")
        raise typer.Exit(1)

    viewer = PostViewer(_build_cache())
    total = viewer.load(posts)
    if total:
        with console.status(f"Fetching {total} images..."):
            await viewer.cache.join()
    viewer.open_post(posts[post_index])
    return viewer


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """LDUI - browse Discourse topics with images in the terminal."""
    log_level = "DEBUG" if verbose else settings.log_level
    setup_logging(level=log_level, json_output=settings.log_json, log_file=settings.log_file)
    logger.debug("CLI initialized with log level: {}", log_level)


@app.command()
def latest(
    page: int = typer.Option(1, "--page", "-p", help="Page number"),
):
    """List the latest topics."""
    from .discourse import DiscourseError

    logger.info("Listing latest topics (page {})", page)
    try:
        topics = asyncio.run(_build_client().get_latest_topics(page))
    except DiscourseError as e:
        console.print(f"[red]Error: {e}[/]")
        raise typer.Exit(1)

    table = Table(title=f"Latest topics - {settings.discourse_url}")
    table.add_column("ID", style="cyan")
    table.add_column("Title")
    table.add_column("Posts", style="green")
    table.add_column("Views", style="green")
    for topic in topics:
        table.add_row(str(topic.id), topic.title, str(topic.posts_count), str(topic.views))
    console.print(table)


@app.command()
def topic(
    topic_id: int = typer.Argument(..., help="Topic ID"),
    page: int = typer.Option(1, "--page", "-p", help="Page number"),
    post: int = typer.Option(0, "--post", help="Index of the post on the page"),
    width: int = typer.Option(settings.text_width, "--width", "-w", help="Wrap width"),
    select: int = typer.Option(
        0, "--select", "-s", help="Cycle the image highlight this many times"
    ),
):
    """Show a post with markers where its images belong."""
    from .discourse import DiscourseError

    try:
        viewer = asyncio.run(_load_post(topic_id, page, post))
    except DiscourseError as e:
        console.print(f"[red]Error: {e}[/]")
        raise typer.Exit(1)

    for _ in range(select):
        viewer.cycle()

    focused = viewer.post
    console.print(f"[bold blue]Post #{focused.id} - {focused.username}[/]")
    console.print()
    for line, is_marker in viewer.annotated_lines(width):
        if is_marker:
            selected = "✓" in line
            console.print(Text(line, style="bold black on yellow" if selected else "italic blue"))
        else:
            console.print(Text(line))

    missing = len(viewer.references) - len(viewer.selection.available)
    if missing:
        console.print(f"\n[yellow]{missing} image(s) unavailable[/]")


@app.command()
def view(
    topic_id: int = typer.Argument(..., help="Topic ID"),
    page: int = typer.Option(1, "--page", "-p", help="Page number"),
    post: int = typer.Option(0, "--post", help="Index of the post on the page"),
    image: int = typer.Option(0, "--image", "-i", help="Index among available images"),
    width: int = typer.Option(settings.text_width, "--width", "-w", help="Preview width"),
    height: int = typer.Option(24, "--height", help="Preview height in lines"),
):
    """Preview one image of a post in the terminal."""
    from .discourse import DiscourseError
    from .images import render_preview

    try:
        viewer = asyncio.run(_load_post(topic_id, page, post))
    except DiscourseError as e:
        console.print(f"[red]Error: {e}[/]")
        raise typer.Exit(1)

    for _ in range(image + 1):
        viewer.cycle()
    if not viewer.activate():
        console.print("[yellow]No such image available[/]")
        raise typer.Exit(1)

    url, path = viewer.viewing
    console.print(render_preview(path, max_width=width, max_height=height))
    console.print(f"[cyan]Link: {url}[/]")
    viewer.dismiss()


@app.command()
def images(
    markup_file: Path = typer.Argument(..., help="File containing post markup", exists=True),
    lines: int = typer.Option(0, "--lines", "-n", help="Output line count (default: cleaned text)"),
    width: int = typer.Option(settings.text_width, "--width", "-w", help="Wrap width"),
):
    """Show image references and placements for a markup file."""
    from .images import extract_image_references, map_placements, markup_length
    from .text import clean_markup

    markup = markup_file.read_text(encoding="utf-8")
    references = extract_image_references(markup)
    total_lines = lines or len(clean_markup(markup, width))
    hints = {h.ordinal: h.line for h in map_placements(references, markup_length(markup), total_lines)}
    logger.debug("{}: {} references over {} lines", markup_file, len(references), total_lines)

    table = Table(title=f"Images in {markup_file.name} ({total_lines} lines)")
    table.add_column("#", style="cyan")
    table.add_column("URL")
    table.add_column("Offset", style="green")
    table.add_column("Line", style="green")
    for ref in references:
        offset = "-" if ref.raw_offset is None else str(ref.raw_offset)
        line = str(hints[ref.ordinal]) if ref.ordinal in hints else "-"
        table.add_row(str(ref.ordinal), ref.url, offset, line)
    console.print(table)


@app.command()
def info():
    """Show configuration and image cache status."""
    logger.debug("Displaying configuration and status")
    console.print("[bold blue]LDUI Configuration[/]")

    table = Table(title="Settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Forum URL", settings.discourse_url)
    table.add_row("API Key", "***" if settings.has_api_key else "[yellow]NOT SET[/]")
    table.add_row("API Username", settings.api_username)
    table.add_row("Image Cache Path", settings.image_cache_path)
    table.add_row("Image Fetch Timeout", f"{settings.image_fetch_timeout}s")
    table.add_row("Text Width", str(settings.text_width))
    table.add_row("Log File", settings.log_file or "stderr")

    console.print(table)

    console.print("\n[bold]Image Cache Status[/]")
    if settings.image_path.exists():
        files = [p for p in settings.image_path.iterdir() if p.is_file() and not p.name.startswith(".")]
        size = sum(p.stat().st_size for p in files)
        console.print(f"Files on disk: {len(files)} ({size / 1024:.1f} KB)")
        console.print("Files from earlier runs are not reused until fetched again")
    else:
        console.print("Image cache directory does not exist yet")


if __name__ == "__main__":
    app()
