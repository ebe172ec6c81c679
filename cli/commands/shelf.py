import click
from typing import Optional

from stacks.commands import QueryShelfOptionsCommand
from stacks.ids import BookcaseId, ShelfId
from ..utils import get_stacks, handle_stacks_errors, print_field, print_occupancy


@click.group()
def shelf():
    """Shelf related commands"""
    pass


@shelf.command()
@click.option('--bookcase-id', default=None, type=int, help='Only shelves of this bookcase')
@click.option('--available/--all', default=False, help='Only shelves with free space')
@handle_stacks_errors("Shelf options")
def options(bookcase_id: Optional[int], available: bool):
    """List shelves a book can be placed on"""
    stacks = get_stacks()
    command = QueryShelfOptionsCommand(
        bookcase_id=BookcaseId(bookcase_id) if bookcase_id is not None else None
    )
    shelf_options = stacks.query_shelf_options(command)
    if available:
        shelf_options = [option for option in shelf_options if option.has_space]

    if not shelf_options:
        click.echo(click.style("\nNo shelves found", fg='yellow'))
        return

    click.echo(click.style(f"\nFound {len(shelf_options)} shelves:", fg='blue'))
    for option in shelf_options:
        print_occupancy(
            f"[{option.shelf_id}] bookcase {option.bookcase_id} #{option.position} {option.label}",
            option.current_count,
            option.capacity,
        )


@shelf.command()
@click.argument('shelf_id', type=int)
@handle_stacks_errors("Shelf browsing")
def browse(shelf_id: int):
    """List the books on a shelf"""
    stacks = get_stacks()
    with stacks.unit_of_work() as services:
        records = services.shelves.browse_shelf(ShelfId(shelf_id))
        occupancy = services.shelves.occupancy(ShelfId(shelf_id))

    click.echo(click.style(f"\nShelf {shelf_id} ", fg='blue') + click.style(f"({occupancy.value})", fg='cyan'))
    if not records:
        click.echo(click.style("No books on this shelf", fg='yellow'))
        return
    for record in records:
        click.echo(click.style(f"\n[{record.book_id}] ", fg='cyan') + click.style(record.title, fg='green'))
        print_field("Author(s)", ", ".join(record.authors))
        print_field("ISBN", record.isbn)
        print_field("Publisher", record.publisher)
        print_field("Year", record.publication_year)
