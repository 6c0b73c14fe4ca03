"""CLI interface for KnowledgeBot."""

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from dotenv import load_dotenv

load_dotenv()

app = typer.Typer(name="knowledgebot", help="Chat with an assistant grounded in your own notes")
console = Console()


def _open_store():
    from knowledgebot.config.settings import get_settings
    from knowledgebot.knowledge.store import KnowledgeStore

    return KnowledgeStore(get_settings().knowledge_path)


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level")):
    from knowledgebot.config.settings import get_settings

    level = "DEBUG" if verbose else get_settings().log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command()
def add(
    title: str = typer.Argument(help="Title of the snippet"),
    content: str = typer.Argument(help="Snippet text"),
):
    """Add a hand-written snippet to the knowledge base."""
    store = _open_store()
    try:
        item = store.add(title=title, content=content)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]Added '{item.title}' ({item.id})[/green]")


@app.command(name="import")
def import_(path: str = typer.Argument(help="File or directory to import (.txt, .md, .json)")):
    """Import documents into the knowledge base."""
    from knowledgebot.knowledge.importer import (
        FileTypeMismatchError,
        import_directory,
        import_file,
    )

    store = _open_store()
    file_path = Path(path).resolve()

    if not file_path.exists():
        console.print(f"[red]Path not found: {file_path}[/red]")
        raise typer.Exit(1)

    if file_path.is_dir():
        items, skipped = import_directory(store, file_path)
        for item in items:
            console.print(f"  [green]✓[/green] {item.title}")
        for f, reason in skipped:
            console.print(f"  [yellow]⚠ Skipped[/yellow]  {f.name}: {reason}")
        if not items:
            console.print("[yellow]No documents were imported.[/yellow]")
            raise typer.Exit(1)
        console.print(f"[green]Imported {len(items)} document(s)[/green]")
        return

    try:
        item = import_file(store, file_path)
    except FileTypeMismatchError as e:
        console.print(f"[red]File type mismatch — {e}[/red]")
        raise typer.Exit(1)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]Imported '{item.title}' ({item.id})[/green]")


@app.command(name="list")
def list_items(search: str = typer.Option("", "--search", "-s", help="Filter by title or content")):
    """List knowledge items, newest first."""
    store = _open_store()
    items = store.search(search) if search else store.all()
    if not items:
        console.print("[yellow]No knowledge items found. Add one with: knowledgebot add <title> <content>[/yellow]")
        return

    table = Table(title="Knowledge Base")
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Title", style="cyan")
    table.add_column("Kind", style="magenta")
    table.add_column("Added")
    table.add_column("Preview")

    for item in items:
        preview = item.content.replace("\n", " ")
        if len(preview) > 60:
            preview = preview[:57] + "..."
        table.add_row(
            item.id,
            item.title,
            item.kind.value,
            item.created_at.strftime("%Y-%m-%d %H:%M"),
            preview,
        )
    console.print(table)


@app.command()
def delete(item_id: str = typer.Argument(help="ID of the item to delete")):
    """Delete a knowledge item."""
    store = _open_store()
    if not store.delete(item_id):
        console.print(f"[red]No knowledge item with id {item_id}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]Deleted {item_id}[/green]")


@app.command()
def stats():
    """Show knowledge base and configuration details."""
    from knowledgebot.config.settings import get_settings

    settings = get_settings()
    store = _open_store()
    info = store.stats()

    panel = Panel(
        f"[cyan]Knowledge items:[/cyan] {info['total_items']}\n"
        f"[cyan]Store path:[/cyan] {info['path']}\n"
        f"[cyan]Provider:[/cyan] {settings.llm_provider} / {settings.llm_model}\n"
        f"[cyan]API key:[/cyan] {'configured' if settings.api_key.strip() else '[red]missing[/red]'}",
        title="KnowledgeBot",
    )
    console.print(panel)


@app.command()
def chat(
    provider: str = typer.Option(None, "--provider", "-p", help="LLM provider override"),
    model: str = typer.Option(None, "--model", "-m", help="Model name override"),
):
    """Start an interactive chat grounded in the knowledge base."""
    from knowledgebot.config.settings import get_settings
    from knowledgebot.core.session import ChatSession
    from knowledgebot.llm.client import GenerationClient

    settings = get_settings()
    if provider:
        settings.llm_provider = provider
    if model:
        settings.llm_model = model

    store = _open_store()
    try:
        client = GenerationClient.from_settings(settings)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    session = ChatSession(client=client, store=store)

    console.print(Panel(
        f"Knowledge: {store.count()} documents linked\n"
        f"Provider: {settings.llm_provider} / {settings.llm_model}\n"
        f"Type [bold]quit[/bold] or [bold]exit[/bold] to end",
        title="KnowledgeBot Chat",
    ))
    if not store.count():
        console.print("[yellow]The knowledge base is empty. Add items with: knowledgebot add[/yellow]")

    while True:
        try:
            user_input = Prompt.ask("\n[bold green]You[/bold green]")
        except (KeyboardInterrupt, EOFError):
            break

        if user_input.strip().lower() in ("quit", "exit", "q"):
            break

        with console.status("[bold blue]Thinking through your knowledge base…"):
            reply = session.submit(user_input)
        if reply is None:
            continue

        console.print("\n[bold cyan]KnowledgeBot[/bold cyan]")
        if reply.outcome is not None and reply.outcome.is_failure:
            console.print(reply.content, style="red", markup=False)
        else:
            console.print(Markdown(reply.content))

    console.print("\n[dim]Chat ended.[/dim]")


if __name__ == "__main__":
    app()
