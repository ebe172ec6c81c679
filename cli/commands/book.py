import click
from typing import Optional, Tuple

from stacks.commands import PlaceBookCommand, RegisterBookCommand, RemoveBookCommand
from stacks.ids import BookId, ShelfId
from ..utils import get_stacks, handle_stacks_errors, print_field


@click.group()
def book():
    """Book related commands"""
    pass


@book.command()
@click.argument('title')
@click.option('--author', 'authors', multiple=True, help='Author as "First Last"; repeat for several')
@click.option('--isbn', default=None, help='ISBN-10 or ISBN-13, hyphens allowed')
@click.option('--publisher', default=None, help='Publisher')
@click.option('--year', 'publication_year', default=None, type=int, help='Publication year')
@click.option('--description', default=None, help='Free-text description')
@handle_stacks_errors("Book registration")
def add(title: str, authors: Tuple[str, ...], isbn: Optional[str], publisher: Optional[str],
        publication_year: Optional[int], description: Optional[str]):
    """Register a new, unshelved book

    Example:
        bibby-stacks book add "Project Hail Mary" --author "Andy Weir" --isbn 978-0593135204
    """
    stacks = get_stacks()
    book_id = stacks.register_book(RegisterBookCommand(
        title=title,
        authors=authors,
        isbn=isbn,
        publisher=publisher,
        publication_year=publication_year,
        description=description,
    ))
    click.echo(click.style("\nRegistered book ", fg='green') + click.style(str(book_id), fg='cyan'))


@book.command()
@click.argument('book_id', type=int)
@click.argument('shelf_id', type=int)
@handle_stacks_errors("Book placement")
def place(book_id: int, shelf_id: int):
    """Place a book on a shelf"""
    stacks = get_stacks()
    stacks.place_book(PlaceBookCommand(book_id=BookId(book_id), shelf_id=ShelfId(shelf_id)))
    click.echo(click.style(f"\nPlaced book {book_id} on shelf {shelf_id}", fg='green'))


@book.command()
@click.argument('book_id', type=int)
@handle_stacks_errors("Book removal")
def remove(book_id: int):
    """Take a book off its shelf"""
    stacks = get_stacks()
    stacks.remove_book(RemoveBookCommand(book_id=BookId(book_id)))
    click.echo(click.style(f"\nBook {book_id} is no longer shelved", fg='green'))


@book.command()
@click.argument('book_id', type=int)
@handle_stacks_errors("Placement history")
def history(book_id: int):
    """Show where a book has been shelved"""
    stacks = get_stacks()
    with stacks.unit_of_work() as services:
        record = services.catalog.get_book(BookId(book_id))
        placements = services.catalog.placement_history(record.book_id)

        click.echo(click.style(f"\n[{record.id}] ", fg='cyan') + click.style(record.title, fg='green'))
        print_field("Current shelf", record.shelf_id if record.shelf_id is not None else "none")
        if not placements:
            click.echo(click.style("  Never shelved", fg='yellow'))
            return
        for placement in placements:
            action = f"placed on shelf {placement.shelf_id}" if placement.shelf_id is not None else "removed"
            click.echo(click.style(f"  {placement.placed_at:%Y-%m-%d %H:%M:%S} ", fg='blue') +
                       click.style(action, fg='cyan'))
