# cli/main.py
import dataclasses
from typing import Optional

import click

from stacks.app import Stacks
from stacks.config import Settings, configure_logging
from stacks.errors import ConfigurationError
from .commands.bookcase import bookcase
from .commands.shelf import shelf
from .commands.book import book
from .commands.dev import dev


@click.group()
@click.option('--database-url', default=None, help='SQLAlchemy database URL (overrides DATABASE_URL)')
@click.option('--log-level', default=None,
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'], case_sensitive=False),
              help='Log level (overrides STACKS_LOG_LEVEL)')
@click.pass_context
def cli(ctx: click.Context, database_url: Optional[str], log_level: Optional[str]):
    """Bookcase, shelf and book placement CLI"""
    if ctx.obj is not None:
        return
    try:
        settings = Settings.from_env()
    except ConfigurationError as e:
        click.echo(click.style(f"Configuration error: {e.message}", fg='red'), err=True)
        ctx.exit(1)

    overrides = {}
    if database_url:
        overrides['database_url'] = database_url
    if log_level:
        overrides['log_level'] = log_level.upper()
    settings = dataclasses.replace(settings, **overrides)

    configure_logging(settings.log_level)
    ctx.obj = Stacks.from_settings(settings)


cli.add_command(bookcase)
cli.add_command(shelf)
cli.add_command(book)
cli.add_command(dev)


def main():
    """Entry point for the CLI"""
    cli()


if __name__ == '__main__':
    main()
