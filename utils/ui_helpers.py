import os
import json
from typing import Any, Dict, Iterable
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.markup import escape

# Environment variable to control CLI output mode
# Allowed values: 'plain' (default), 'json', 'rich'
OUTPUT_MODE_ENV = "LIB_CLI_OUTPUT"

_console = Console()

def set_output_mode(mode: str) -> None:
    mode = (mode or "").lower().strip()
    if mode in {"plain", "json", "rich"}:
        os.environ[OUTPUT_MODE_ENV] = mode

def get_output_mode() -> str:
    return os.environ.get(OUTPUT_MODE_ENV, "plain").lower()

def format_author(author: Any) -> str:
    return author or "Unknown"

def print_catalog_result(items: Iterable[Any]) -> None:
    """Print catalog items in the current output mode.
    - plain: 'ID - Title by Author [format] avail/copies' lines, or 'No items in catalog.'
    - json: JSON array of item dicts
    - rich: Rich table with the catalog page columns
    """
    items = list(items)
    mode = get_output_mode()

    if not items:
        print("No items in catalog.")
        return

    if mode == "json":
        print(json.dumps([i.to_dict() for i in items], ensure_ascii=False))
    elif mode == "rich":
        table = Table(title="📚 Library Catalog", show_lines=True, header_style="bold cyan")
        table.add_column("Item ID", style="magenta", no_wrap=True)
        table.add_column("Title", style="white")
        table.add_column("Author", style="white")
        table.add_column("Year", justify="right")
        table.add_column("Format")
        table.add_column("Total Copies", justify="right")
        table.add_column("Available Copies", justify="right")
        table.add_column("Ratings", justify="right")
        for i in items:
            table.add_row(
                str(i.id), escape(i.title), escape(format_author(i.author)), str(i.year),
                i.format, str(i.copies), str(i.avail_copies), str(i.ratings),
            )
        _console.print(table)
    else:
        for i in items:
            print(f"{i.id} - {i.title} by {format_author(i.author)} [{i.format}] {i.avail_copies}/{i.copies} available")

def print_members_result(members: Iterable[Any]) -> None:
    """Print members and the titles they hold in the current output mode."""
    members = list(members)
    mode = get_output_mode()

    if not members:
        print("No members registered.")
        return

    if mode == "json":
        print(json.dumps([m.to_dict() for m in members], ensure_ascii=False))
    elif mode == "rich":
        table = Table(title="👥 Member Details", show_lines=True, header_style="bold cyan")
        table.add_column("Member ID", style="magenta", no_wrap=True)
        table.add_column("Name", style="white")
        table.add_column("Item Titles", style="white")
        for m in members:
            table.add_row(str(m.id), escape(m.full_name), escape(m.checkout_summary()))
        _console.print(table)
    else:
        for m in members:
            name = f" {m.full_name}" if m.full_name else ""
            print(f"Member {m.id}{name}: {m.checkout_summary() or '-'}")

def print_returned_item(item: Any) -> None:
    mode = get_output_mode()
    if mode == "json":
        print(json.dumps(item.to_dict(), ensure_ascii=False))
    elif mode == "rich":
        _console.print(Panel.fit(
            f"[bold]Returned Book:[/] {escape(str(item))}\n"
            f"[bold]Available Copies:[/] {item.avail_copies}/{item.copies}",
            title="✅ Book returned successfully!",
            border_style="green",
        ))
    else:
        print("Book returned successfully!")
        print(f"Returned Book: {item}")

def print_stats_result(stats: Dict[str, Any]) -> None:
    mode = get_output_mode()

    if not stats:
        print("No statistics available.")
        return

    if mode == "json":
        print(json.dumps(stats, ensure_ascii=False))
    elif mode == "rich":
        content = (
            f"[bold]Catalog Items:[/] {stats.get('total_items', 0)}\n"
            f"[bold]Available Copies:[/] {stats.get('available_copies', 0)}/{stats.get('total_copies', 0)}\n"
            f"[bold]Members:[/] {stats.get('members', 0)}"
        )
        _console.print(Panel.fit(content, title="📊 Stats", border_style="blue"))
    else:
        print(f"Catalog Items: {stats.get('total_items', 0)}")
        print(f"Available Copies: {stats.get('available_copies', 0)}/{stats.get('total_copies', 0)}")
        print(f"Members: {stats.get('members', 0)}")
