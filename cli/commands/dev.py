import click

from ..utils import get_stacks, handle_stacks_errors


@click.group()
def dev():
    """Development and maintenance commands"""
    pass


@dev.command(name='init-db')
@handle_stacks_errors("Schema creation")
def init_db():
    """Create all tables"""
    stacks = get_stacks()
    stacks.init_db()
    click.echo(click.style("\nDatabase initialized", fg='green'))


@dev.command()
@click.option('--retry-failed/--no-retry-failed', default=False, help='Also re-drive cascades that failed')
@handle_stacks_errors("Reconciliation")
def reconcile(retry_failed: bool):
    """Finish interrupted bookcase deletions and repair dangling references"""
    stacks = get_stacks()
    report = stacks.reconcile(retry_failed=retry_failed)

    if report.clean:
        click.echo(click.style("\nNothing to reconcile", fg='green'))
        return

    click.echo("\n" + click.style("Results:", fg='blue'))
    click.echo(click.style("Cascades resumed: ", fg='blue') + click.style(str(len(report.resumed)), fg='green'))
    click.echo(click.style("Cascades failed: ", fg='blue') +
               click.style(str(len(report.failed)), fg='red' if report.failed else 'green'))
    click.echo(click.style("Dangling books repaired: ", fg='blue') +
               click.style(str(len(report.dangling)), fg='cyan'))
    click.echo(click.style("Orphaned shelves removed: ", fg='blue') +
               click.style(str(len(report.removed_shelves)), fg='cyan'))


@dev.command()
@handle_stacks_errors("Integrity check")
def check():
    """Fail if any book references a missing shelf"""
    stacks = get_stacks()
    stacks.check_integrity()
    click.echo(click.style("\nNo dangling shelf references", fg='green'))
