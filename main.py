import logging
import sys
from typing import Optional

import typer
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table
from rich.markup import escape

from config import settings
from lms.errors import LibraryError
from lms.library import Library
from utils.ui_helpers import (
    set_output_mode,
    print_catalog_result,
    print_members_result,
    print_returned_item,
    print_stats_result,
)
from utils.validators import IdValidator, TextValidator

logging.basicConfig(
    level=logging.DEBUG if settings.debug else getattr(logging, settings.log_level, logging.INFO),
    format="%(levelname)s: %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

console = Console()


# Single Library instance for this process
class LibraryManager:
    _instance: Optional[Library] = None
    _catalog_file: Optional[str] = None

    @classmethod
    def get_instance(cls) -> Library:
        """Return the session Library, loading the catalog file on first use."""
        catalog_file = cls._catalog_file or settings.catalog_file
        if cls._instance is None:
            cls._instance = Library()
            try:
                cls._instance.load_catalog(catalog_file)
                logger.info("Library initialized successfully")
            except LibraryError as e:
                # Keep the session usable with an empty catalog; `load` can fill it later.
                logger.error(f"Failed to initialize library: {e}")
        return cls._instance

    @classmethod
    def use_catalog(cls, path: str) -> None:
        """Point the session at a different catalog file, dropping any loaded state."""
        if path != cls._catalog_file:
            cls._catalog_file = path
            cls._instance = None

    @classmethod
    def reset(cls) -> None:
        cls._instance = None
        cls._catalog_file = None


def _print_error(e: Exception) -> None:
    print(f"Error: {e}")


# --- Typer CLI ---
app = typer.Typer(help=settings.app_name)

@app.callback()
def _global_options(
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | json | rich (default: plain)",
    ),
    catalog: Optional[str] = typer.Option(
        None,
        "--catalog",
        "-c",
        help="Catalog CSV loaded at startup (default: LIBRARY_CATALOG_FILE)",
    ),
):
    """Global options (output mode, catalog file)."""
    if output:
        set_output_mode(output)
    if catalog:
        LibraryManager.use_catalog(catalog)

@app.command("catalog")
def cli_catalog():
    """List every catalog item with its copy counts."""
    print_catalog_result(LibraryManager.get_instance().query_catalog())

@app.command("members")
def cli_members():
    """List members and the items they currently hold."""
    print_members_result(LibraryManager.get_instance().query_members())

@app.command("stats")
def cli_stats():
    """Show catalog and membership totals."""
    print_stats_result(LibraryManager.get_instance().get_statistics())

@app.command("load")
def cli_load(file_path: str):
    """Load additional catalog items from a CSV file."""
    lib = LibraryManager.get_instance()
    try:
        count = lib.load_catalog(file_path)
        print(f"Loaded {count} items into library")
    except LibraryError as e:
        _print_error(e)

@app.command("register")
def cli_register(
    first: Optional[str] = typer.Option(None, "--first", "-f", help="First name"),
    last: Optional[str] = typer.Option(None, "--last", "-l", help="Last name"),
):
    """Register a new member without issuing anything."""
    member = LibraryManager.get_instance().register_member(
        TextValidator.clean_name(first), TextValidator.clean_name(last)
    )
    print(f"Registered member {member.id}")

@app.command("issue")
def cli_issue(
    item_id: str = typer.Argument(..., help="Item ID"),
    member_id: Optional[str] = typer.Option(None, "--member-id", "-m", help="Existing member ID"),
    first: Optional[str] = typer.Option(None, "--first", "-f", help="First name of a new member"),
    last: Optional[str] = typer.Option(None, "--last", "-l", help="Last name of a new member"),
):
    """Issue an item to an existing member (--member-id) or to a new one (--first/--last)."""
    lib = LibraryManager.get_instance()
    try:
        parsed_item = IdValidator.parse_id(item_id, "Item ID")
        if member_id is not None:
            parsed_member = IdValidator.parse_id(member_id, "Member ID")
            record = lib.issue_to_existing_member(parsed_item, parsed_member)
        else:
            member, record = lib.issue_to_new_member(
                parsed_item, TextValidator.clean_name(first), TextValidator.clean_name(last)
            )
            parsed_member = member.id
    except LibraryError as e:
        _print_error(e)
        return
    print("Book issued successfully!")
    print(f"Member ID: {parsed_member}")
    print(f"Due date: {record.due_date:%Y-%m-%d}")

@app.command("return")
def cli_return(
    item_id: str = typer.Argument(..., help="Item ID"),
    member_id: str = typer.Argument(..., help="Member ID"),
):
    """Return an item checked out by a member."""
    lib = LibraryManager.get_instance()
    try:
        item = lib.return_item(
            IdValidator.parse_id(item_id, "Item ID"),
            IdValidator.parse_id(member_id, "Member ID"),
        )
    except LibraryError as e:
        _print_error(e)
        return
    print_returned_item(item)

@app.command("renew")
def cli_renew(
    item_id: str = typer.Argument(..., help="Item ID"),
    member_id: str = typer.Argument(..., help="Member ID"),
):
    """Extend a checkout by the item's renewal period."""
    lib = LibraryManager.get_instance()
    try:
        record = lib.renew(
            IdValidator.parse_id(item_id, "Item ID"),
            IdValidator.parse_id(member_id, "Member ID"),
        )
    except LibraryError as e:
        _print_error(e)
        return
    print(f"Renewed: {record.title} (ID: {record.item_id}), due {record.due_date:%Y-%m-%d}")

@app.command("menu")
def cli_menu():
    """Open the interactive menu."""
    run_menu()


# --- Interactive menu pages ---
def issue_page(lib: Library) -> None:
    """Issue an item; a blank member id registers a new member."""
    item_text = Prompt.ask("Item ID")
    member_text = Prompt.ask("Member ID [dim](leave blank for a new member)[/]", default="")
    try:
        item_id = IdValidator.parse_id(item_text, "Item ID")
        if member_text.strip():
            member_id = IdValidator.parse_id(member_text, "Member ID")
            record = lib.issue_to_existing_member(item_id, member_id)
        else:
            first = TextValidator.clean_name(Prompt.ask("First name", default=""))
            last = TextValidator.clean_name(Prompt.ask("Last name", default=""))
            member, record = lib.issue_to_new_member(item_id, first, last)
            member_id = member.id
    except LibraryError as e:
        console.print(f"[bold red]Error:[/] {escape(str(e))}")
        return
    console.print(Panel.fit(
        f"[bold]Title:[/] {escape(record.title)} (ID: {record.item_id})\n"
        f"[bold]Member ID:[/] {member_id}\n"
        f"[bold]Due:[/] {record.due_date:%Y-%m-%d}",
        title="✅ Book issued successfully!",
        border_style="green",
    ))

def return_page(lib: Library) -> None:
    try:
        item_id = IdValidator.parse_id(Prompt.ask("Item ID"), "Item ID")
        member_id = IdValidator.parse_id(Prompt.ask("Member ID"), "Member ID")
        item = lib.return_item(item_id, member_id)
    except LibraryError as e:
        console.print(f"[bold red]Error:[/] {escape(str(e))}")
        return
    print_returned_item(item)

def renew_page(lib: Library) -> None:
    try:
        item_id = IdValidator.parse_id(Prompt.ask("Item ID"), "Item ID")
        member_id = IdValidator.parse_id(Prompt.ask("Member ID"), "Member ID")
        record = lib.renew(item_id, member_id)
    except LibraryError as e:
        console.print(f"[bold red]Error:[/] {escape(str(e))}")
        return
    console.print(f"[green]🔁 {escape(record.title)} now due {record.due_date:%Y-%m-%d}[/]")

def load_page(lib: Library) -> None:
    path = Prompt.ask("CSV file", default=settings.catalog_file)
    try:
        with console.status("[bold green]Loading catalog..."):
            count = lib.load_catalog(path)
    except LibraryError as e:
        console.print(f"[bold red]Error:[/] {escape(str(e))}")
        return
    console.print(f"[green]Loaded {count} items into library[/]")

def run_menu():
    """Interactive menu with the Issue, Return, Member Details and Catalog pages."""
    lib = LibraryManager.get_instance()
    set_output_mode("rich")

    def render_menu() -> None:
        menu_items = [
            ("1", "Issue Books", "📤"),
            ("2", "Return Books", "📥"),
            ("3", "Renew a checkout", "🔁"),
            ("4", "Member Details", "👥"),
            ("5", "Library Catalog", "📚"),
            ("6", "Statistics", "📊"),
            ("7", "Load catalog file", "📂"),
            ("0", "Exit", "🚪"),
        ]

        table = Table.grid(padding=(0, 2))
        table.add_column(justify="right", style="bold cyan", width=4)
        table.add_column(justify="left", style="white")
        for key, label, icon in menu_items:
            table.add_row(f"[reverse]{key}[/]", f"{icon} {label}")

        console.print(Panel(
            table,
            title=settings.app_name,
            border_style="cyan",
            box=box.HEAVY,
            padding=(1, 2),
        ))

    while True:
        render_menu()
        choice = Prompt.ask("Choose an option", choices=["1", "2", "3", "4", "5", "6", "7", "0"], default="5")

        if choice == "1":
            issue_page(lib)
        elif choice == "2":
            return_page(lib)
        elif choice == "3":
            renew_page(lib)
        elif choice == "4":
            print_members_result(lib.query_members())
        elif choice == "5":
            print_catalog_result(lib.query_catalog())
        elif choice == "6":
            print_stats_result(lib.get_statistics())
        elif choice == "7":
            load_page(lib)
        elif choice == "0":
            console.print("[green]Goodbye![/]")
            break
        print()

if __name__ == "__main__":
    if len(sys.argv) > 1:
        app()
    else:
        run_menu()
