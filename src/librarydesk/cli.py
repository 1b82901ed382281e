"""Command-line interface for librarydesk.

Built with Typer for commands and Rich for output. The library lives in
memory, so all circulation work happens inside the interactive ``menu``
session and is gone when it ends.
"""

import logging
from dataclasses import replace
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from . import __version__
from .circulation import CirculationService, FailureReason
from .config import get_config
from .db import get_db

# Create the main app
app = typer.Typer(
    name="librarydesk",
    help="Library catalog and circulation desk.",
    no_args_is_help=True,
)

# Rich console for pretty output
console = Console()


# ============================================================================
# Helper Functions
# ============================================================================


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[bold green]Success:[/bold green] {message}")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[bold yellow]Warning:[/bold yellow] {message}")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[dim]{message}[/dim]")


def format_book_table(books: list, title: str = "Books") -> Table:
    """Create a rich table for displaying books."""
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("ID", justify="right")
    table.add_column("Title", style="cyan", no_wrap=False, max_width=40)
    table.add_column("Author", style="green", max_width=25)
    table.add_column("ISBN")
    table.add_column("Status")

    for book in books:
        if book.is_available:
            status = "[green]Available[/green]"
        else:
            status = f"[yellow]Borrowed by {book.borrowed_by}[/yellow]"
        table.add_row(str(book.id), book.title, book.author, book.isbn or "-", status)

    return table


def format_member_table(members: list, title: str = "Members") -> Table:
    """Create a rich table for displaying members."""
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("ID", justify="right")
    table.add_column("Name", style="cyan")
    table.add_column("Contact")
    table.add_column("Books", justify="center")
    table.add_column("Borrowed IDs")
    table.add_column("Fine", justify="right")

    for member in members:
        borrowed = member.get_borrowed_books()
        fine = f"${member.fine_amount:.2f}"
        table.add_row(
            str(member.id),
            member.name,
            member.contact,
            f"{len(borrowed)}/{member.max_books}",
            " ".join(str(b) for b in borrowed) or "-",
            f"[bold red]{fine}[/bold red]" if member.has_fine else fine,
        )

    return table


def format_record_table(records: list, service: CirculationService) -> Table:
    """Create a rich table for displaying lending records."""
    table = Table(title="Lending History", show_header=True, header_style="bold magenta")
    table.add_column("ID", justify="right")
    table.add_column("Member", justify="right")
    table.add_column("Book", justify="right")
    table.add_column("Issued")
    table.add_column("Returned")
    table.add_column("Overdue", justify="right")

    for record in records:
        days = service.ledger.days_overdue(record)
        if record.is_returned:
            returned = record.return_time.strftime("%Y-%m-%d %H:%M")
        else:
            returned = "[yellow]Not returned[/yellow]"
        table.add_row(
            str(record.id),
            str(record.member_id),
            str(record.book_id),
            record.issue_time.strftime("%Y-%m-%d %H:%M"),
            returned,
            f"[bold red]{days}d[/bold red]" if days else "-",
        )

    return table


def _prompt_text(label: str) -> str:
    return typer.prompt(label, default="", show_default=False)


def _prompt_id(label: str) -> int:
    return typer.prompt(label, type=int)


# ============================================================================
# Menu Actions
# ============================================================================


def _add_book(service: CirculationService) -> None:
    title = _prompt_text("Book title")
    author = _prompt_text("Author")
    isbn = _prompt_text("ISBN")
    book_id = service.add_book(title, author, isbn)
    print_success(f"Book added. Book ID: {book_id}")


def _add_member(service: CirculationService) -> None:
    name = _prompt_text("Member name")
    contact = _prompt_text("Contact")
    member_id = service.add_member(name, contact)
    print_success(f"Member registered. Member ID: {member_id}")


def _issue_book(service: CirculationService) -> None:
    member_id = _prompt_id("Member ID")
    book_id = _prompt_id("Book ID")
    result = service.issue_book(member_id, book_id)

    if not result.ok:
        if result.failure is FailureReason.OUTSTANDING_FINE:
            print_error(f"{result.message} of ${result.outstanding_fine:.2f}")
        else:
            print_error(result.message)
        return

    print_success("Book issued")
    console.print(f"Member: {result.member_name}")
    console.print(f"Book: {result.book_title}")
    print_info(f"Return within {result.loan_period_days} days to avoid a fine.")


def _return_book(service: CirculationService) -> None:
    member_id = _prompt_id("Member ID")
    book_id = _prompt_id("Book ID")
    result = service.return_book(member_id, book_id)

    if not result.ok:
        print_error(result.message)
        return

    print_success("Book returned")
    if result.overdue_days > 0:
        print_warning(
            f"Overdue by {result.overdue_days} days. Fine: ${result.fine_charged:.2f}"
        )


def _search_books(service: CirculationService) -> None:
    query = _prompt_text("Search (title/author)")
    books = service.search_books(query)
    if not books:
        print_info(f"No books found matching: {query}")
        return
    console.print(format_book_table(books, title="Search Results"))


def _list_books(service: CirculationService) -> None:
    books = service.list_books()
    if not books:
        print_info("No books in library.")
        return
    console.print(format_book_table(books, title="All Books"))


def _list_members(service: CirculationService) -> None:
    members = service.list_members()
    if not members:
        print_info("No members registered.")
        return
    console.print(format_member_table(members, title="All Members"))


def _pay_fine(service: CirculationService) -> None:
    member_id = _prompt_id("Member ID")
    quote = service.pay_fine(member_id)

    if quote.failure is FailureReason.NO_FINE_DUE:
        print_info("No pending fine.")
        return
    if not quote.ok:
        print_error(quote.message)
        return

    console.print(f"Fine amount: [bold]${quote.amount:.2f}[/bold]")
    if not typer.confirm("Do you want to pay?", default=False):
        print_info("Fine not paid.")
        return

    service.clear_fine(member_id)
    print_success("Fine paid")


def _show_history(service: CirculationService) -> None:
    records = service.list_records()
    if not records:
        print_info("No lending records.")
        return
    console.print(format_record_table(records, service))


MENU = [
    ("1", "Add Book", _add_book),
    ("2", "Add Member", _add_member),
    ("3", "Issue Book", _issue_book),
    ("4", "Return Book", _return_book),
    ("5", "Search Books", _search_books),
    ("6", "Display All Books", _list_books),
    ("7", "Display All Members", _list_members),
    ("8", "Pay Fine", _pay_fine),
    ("9", "Exit", None),
    ("10", "Lending History", _show_history),
]


def _render_menu() -> Panel:
    lines = "\n".join(f"{key:>3}. {label}" for key, label, _ in MENU)
    return Panel(f"[bold]LIBRARY MANAGEMENT SYSTEM[/bold]\n\n{lines}", expand=False)


# ============================================================================
# Commands
# ============================================================================


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log circulation activity"),
) -> None:
    """Library catalog and circulation desk."""
    config = get_config()
    errors = config.validate()
    for error in errors:
        print_error(error)
    if errors:
        raise typer.Exit(1)

    level = logging.INFO if verbose else getattr(logging, config.log_level, logging.WARNING)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


@app.command()
def menu(
    max_books: Optional[int] = typer.Option(
        None, "--max-books", "-m", min=1, help="Borrowing limit for new members"
    ),
) -> None:
    """Run the interactive circulation desk."""
    config = get_config()
    if max_books is not None:
        config = replace(config, max_books=max_books)
    service = CirculationService(get_db(), config=config)
    actions = {key: action for key, _, action in MENU}

    while True:
        console.print(_render_menu())
        choice = typer.prompt("Enter your choice").strip()

        if choice not in actions:
            print_error("Invalid choice! Please try again.")
            continue

        action = actions[choice]
        if action is None:
            console.print("Thank you for using Library Management System!")
            return
        action(service)


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"librarydesk version {__version__}")


if __name__ == "__main__":
    app()
