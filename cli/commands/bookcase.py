import click
from typing import Optional

from stacks.config import CascadeMode
from stacks.commands import CreateBookcaseCommand, DeleteBookcaseCommand
from stacks.ids import BookcaseId
from ..utils import get_stacks, handle_stacks_errors, print_field, print_occupancy


@click.group()
def bookcase():
    """Bookcase related commands"""
    pass


@bookcase.command()
@click.option('--label', required=True, help='Bookcase label, unique per location')
@click.option('--location', required=True, help='Where the bookcase stands')
@click.option('--shelves', 'shelf_capacity', default=1, type=int, show_default=True, help='Number of shelves')
@click.option('--capacity', 'book_capacity_per_shelf', required=True, type=int, help='Books per shelf')
@click.option('--zone', default=None, help='Zone within the location')
@click.option('--zone-index', default=None, help='Index within the zone')
@click.option('--owner-id', default=None, type=int, help='Owning user ID')
@handle_stacks_errors("Bookcase creation")
def create(label: str, location: str, shelf_capacity: int, book_capacity_per_shelf: int,
           zone: Optional[str], zone_index: Optional[str], owner_id: Optional[int]):
    """Create a bookcase with its shelves

    Example:
        bibby-stacks bookcase create --label "Oak" --location "Study" --shelves 3 --capacity 5
    """
    stacks = get_stacks()
    result = stacks.create_bookcase(CreateBookcaseCommand(
        owner_id=owner_id,
        label=label,
        zone=zone,
        zone_index=zone_index,
        shelf_capacity=shelf_capacity,
        book_capacity_per_shelf=book_capacity_per_shelf,
        location=location,
    ))
    click.echo(click.style("\nCreated bookcase ", fg='green') +
               click.style(str(result.bookcase_id), fg='cyan'))


@bookcase.command()
@click.argument('bookcase_id', type=int)
@click.option('--force/--no-force', default=False, help='Skip confirmation prompt')
@handle_stacks_errors("Bookcase deletion")
def delete(bookcase_id: int, force: bool):
    """Delete a bookcase, its shelves and their placements"""
    stacks = get_stacks()
    target = BookcaseId(bookcase_id)
    fate = "deleted" if stacks.settings.cascade_mode is CascadeMode.DELETE else "unassigned"

    if not force:
        click.echo("\n" + click.style(
            f"This will delete bookcase {target} and all its shelves; books on them will be {fate}",
            fg='yellow'))
        if not click.confirm("Do you want to continue?"):
            click.echo("Operation cancelled.")
            return

    stacks.delete_bookcase(DeleteBookcaseCommand(bookcase_id=target))
    click.echo(click.style("\nDeleted bookcase ", fg='green') + click.style(str(target), fg='cyan'))


@bookcase.command(name='list')
@click.option('--location', default=None, help='Only bookcases at this location')
@click.option('--owner-id', default=None, type=int, help='Only bookcases of this owner')
@handle_stacks_errors("Bookcase listing")
def list_bookcases(location: Optional[str], owner_id: Optional[int]):
    """List bookcases"""
    stacks = get_stacks()
    with stacks.unit_of_work() as services:
        if location is not None:
            bookcases = services.bookcase_queries.find_by_location(location)
        elif owner_id is not None:
            bookcases = services.bookcase_queries.find_by_owner(owner_id)
        else:
            bookcases = services.bookcase_queries.get_all()

        if not bookcases:
            click.echo(click.style("\nNo bookcases found", fg='yellow'))
            return

        click.echo(click.style(f"\nFound {len(bookcases)} bookcases:", fg='blue'))
        for case in bookcases:
            click.echo(click.style(f"\n[{case.id}] ", fg='cyan') + click.style(case.label, fg='green'))
            print_field("Location", case.location)
            print_field("Zone", case.zone)
            print_field("Zone index", case.zone_index)
            print_field("Shelves", case.shelf_capacity)
            print_field("Total capacity", case.total_capacity)


@bookcase.command()
@click.argument('bookcase_id', type=int)
@handle_stacks_errors("Bookcase lookup")
def show(bookcase_id: int):
    """Show a bookcase and how full each shelf is"""
    stacks = get_stacks()
    with stacks.unit_of_work() as services:
        case = services.bookcase_queries.find_by_id(BookcaseId(bookcase_id))
        slots = services.bookcase_queries.shelf_slots(case.bookcase_id)

        click.echo(click.style(f"\n[{case.id}] ", fg='cyan') + click.style(case.label, fg='green'))
        print_field("Location", case.location)
        print_field("Zone", case.zone)
        print_field("Owner", case.owner_id)
        print_field("Total capacity", case.total_capacity)
        click.echo(click.style("\nShelves:", fg='blue'))
        for slot in slots:
            print_occupancy(f"#{slot.position} {slot.label} (id {slot.shelf_id})", slot.book_count, slot.capacity)
