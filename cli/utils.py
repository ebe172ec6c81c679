import logging
from functools import wraps
from typing import Callable, Optional

import click

from stacks.app import Stacks
from stacks.errors import (
    CapacityExceeded, Conflict, IntegrityViolation, InvalidArgument, NotFound, StacksError
)

logger = logging.getLogger(__name__)


def get_stacks() -> Stacks:
    """Return the engine the root command put on the context"""
    return click.get_current_context().find_root().obj


def handle_stacks_errors(operation_name: str):
    """
    Decorator that turns engine errors into a red message and exit status 1.

    Args:
        operation_name: Human-readable name of the operation (e.g., "Book placement")

    Example:
        @book.command()
        @handle_stacks_errors("Book placement")
        def place(book_id, shelf_id):
            ...
    """
    def decorator(func: Callable):
        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except (NotFound, Conflict, CapacityExceeded, InvalidArgument) as e:
                logger.warning(f"{operation_name} - {type(e).__name__}: {e.message}")
                _fail(operation_name, e)
            except IntegrityViolation as e:
                logger.error(f"{operation_name} - Integrity violation: {e.message}", exc_info=True)
                _fail(operation_name, e)
            except StacksError as e:
                logger.error(f"{operation_name} - {e.message}", exc_info=True)
                _fail(operation_name, e)
        return wrapper
    return decorator


def _fail(operation_name: str, error: StacksError) -> None:
    click.echo("\n" + click.style(f"{operation_name} failed: {error.message}", fg='red'), err=True)
    click.get_current_context().exit(1)


def print_field(name: str, value: Optional[object], indent: str = "  ") -> None:
    """Print one "Name: value" line, skipping empty values"""
    if value is None or value == "":
        return
    click.echo(click.style(f"{indent}{name}: ", fg='blue') + click.style(str(value), fg='cyan'))


def print_occupancy(label: str, count: int, capacity: int, indent: str = "  ") -> None:
    """Print a shelf line colored by how full it is"""
    if count >= capacity:
        color = 'red'
    elif count == 0:
        color = 'green'
    else:
        color = 'yellow'
    click.echo(click.style(f"{indent}{label}: ", fg='blue') + click.style(f"{count}/{capacity}", fg=color))
