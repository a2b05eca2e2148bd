"""
Inkwell CLI Tool

Command-line interface for running the blog server and working with the
storage directly, without going through HTTP.

Usage:
    inkwell serve                      - Start the web server
    inkwell blogs list                 - List all blogs
    inkwell blogs create NAME          - Create a blog
    inkwell blogs show NAME            - Show a blog and its posts
    inkwell posts create BLOG TITLE    - Create a post
    inkwell posts show BLOG TITLE      - Show a post
    inkwell purge-staging              - Remove leftovers of crashed writers
"""
import asyncio
import os
import sys
from pathlib import Path

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from inkwell import __version__
from inkwell.config import Settings, StorageBackendType, get_settings
from inkwell.storage.backends.base import StorageBackend
from inkwell.storage.errors import StorageError
from inkwell.storage.root import StorageRoot
from inkwell.storage.service import create_backend

# Load environment variables
load_dotenv()

console = Console()


def run_storage(settings: Settings, operation):
    """Run ``operation(backend)`` against a started backend.

    Storage errors are printed and end the process with status 1.
    """

    async def runner():
        backend: StorageBackend = create_backend(settings)
        await backend.startup()
        try:
            return await operation(backend)
        finally:
            await backend.shutdown()

    try:
        return asyncio.run(runner())
    except StorageError as e:
        console.print(f"[red]✗ {escape(e.message)}[/red]")
        sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="Inkwell")
@click.option(
    "--root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Storage root directory (overrides STORAGE_ROOT)",
)
@click.pass_context
def main(ctx: click.Context, root: Path | None):
    """
    Inkwell - a multi-user blogging service.
    """
    settings = get_settings()
    if root is not None:
        settings = settings.model_copy(update={"STORAGE_ROOT": root})
    ctx.obj = settings


@main.command()
@click.option("--host", default="127.0.0.1", help="Interface to bind")
@click.option("--port", default=8000, help="Port to run server on")
@click.option("--reload", is_flag=True, help="Reload on code changes")
@click.pass_obj
def serve(settings: Settings, host: str, port: int, reload: bool):
    """
    Start the web server.

    Example:
        inkwell --root ./state serve --port 8080
    """
    import uvicorn

    # The server process builds its own settings from the environment
    os.environ["STORAGE_ROOT"] = str(settings.STORAGE_ROOT)
    get_settings.cache_clear()

    console.print(Panel(
        f"[bold]Inkwell v{__version__}[/bold]\n\n"
        f"Storage: [cyan]{settings.STORAGE_BACKEND.value}[/cyan]"
        + (
            f" at [cyan]{settings.STORAGE_ROOT}[/cyan]"
            if settings.STORAGE_BACKEND == StorageBackendType.FILESYSTEM
            else ""
        )
        + f"\nListening on [cyan]http://{host}:{port}[/cyan]",
        border_style="blue",
    ))

    uvicorn.run("inkwell.main:app", host=host, port=port, reload=reload)


@main.group()
def blogs():
    """Create and inspect blogs."""


@blogs.command("list")
@click.pass_obj
def list_blogs(settings: Settings):
    """List all blogs."""
    results = run_storage(settings, lambda backend: backend.list_blogs())

    if not results:
        console.print("[yellow]No blogs found. Create one with:[/yellow]")
        console.print("[cyan]inkwell blogs create NAME[/cyan]")
        return

    table = Table(title=f"Blogs ({len(results)})")
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    for blog in results:
        table.add_row(escape(blog.name), escape(blog.description))
    console.print(table)


@blogs.command("create")
@click.argument("name")
@click.option("--description", default=None, help="Blog description")
@click.pass_obj
def create_blog(settings: Settings, name: str, description: str | None):
    """Create a blog."""
    run_storage(settings, lambda backend: backend.create_blog(name, description))
    console.print(f"[green]✓[/green] Blog created: [cyan]{escape(name)}[/cyan]")


@blogs.command("show")
@click.argument("name")
@click.pass_obj
def show_blog(settings: Settings, name: str):
    """Show a blog's description and post titles."""
    blog = run_storage(settings, lambda backend: backend.get_blog(name))

    console.print(Panel(escape(blog.description) or "[dim]No description[/dim]", title=escape(blog.name)))
    if not blog.posts:
        console.print("[dim]No posts yet[/dim]")
        return
    for post in blog.posts:
        console.print(f"  • {escape(post.title)}")


@main.group()
def posts():
    """Create and read posts."""


@posts.command("create")
@click.argument("blog")
@click.argument("title")
@click.option("--body", default=None, help="Post body")
@click.option(
    "--file",
    "body_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Read the post body from a UTF-8 file",
)
@click.pass_obj
def create_post(settings: Settings, blog: str, title: str, body: str | None, body_file: Path | None):
    """
    Create a post in a blog.

    Example:
        inkwell posts create notes "Hello" --body "First post."
    """
    if (body is None) == (body_file is None):
        raise click.UsageError("Give exactly one of --body or --file")
    if body_file is not None:
        # Bytes then decode, so line endings survive unchanged
        try:
            body = body_file.read_bytes().decode("utf-8")
        except UnicodeDecodeError:
            console.print(f"[red]✗ {escape(str(body_file))} is not valid UTF-8[/red]")
            sys.exit(1)

    run_storage(settings, lambda backend: backend.create_post(blog, title, body))
    console.print(f"[green]✓[/green] Post created: [cyan]{escape(title)}[/cyan] in [cyan]{escape(blog)}[/cyan]")


@posts.command("show")
@click.argument("blog")
@click.argument("title")
@click.pass_obj
def show_post(settings: Settings, blog: str, title: str):
    """Print a post."""
    post = run_storage(settings, lambda backend: backend.get_post(blog, title))
    console.print(Panel(escape(post.body), title=escape(post.title), subtitle=escape(post.blog_name)))


@main.command("purge-staging")
@click.option(
    "--min-age",
    default=3600.0,
    show_default=True,
    help="Only remove staging entries older than this many seconds",
)
@click.pass_obj
def purge_staging(settings: Settings, min_age: float):
    """Remove staging directories left behind by crashed writers."""
    root = StorageRoot.from_config(settings.storage_config())
    removed = root.purge_staging(min_age_seconds=min_age)
    console.print(f"[green]✓[/green] Removed {removed} staging entr{'y' if removed == 1 else 'ies'}")


if __name__ == "__main__":
    main()
