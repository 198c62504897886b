"""
Options and helpers shared by CLI commands.
"""
import click

from vscdb_recover.core.models import ExtractionResult
from vscdb_recover.readers.base import StoreOpenError
from vscdb_recover.services.extraction import ConversationExtractor

db_argument = click.argument('db_path', type=click.Path(exists=True, dir_okay=False))

role_option = click.option(
    '--role',
    type=click.Choice(['all', 'user', 'assistant']),
    default='all',
    help='Only show messages from this role',
)


def run_extraction(ctx, db_path) -> ExtractionResult:
    """Extract from a file, turning open failures into a CLI abort."""
    try:
        return ConversationExtractor().extract_from_path(db_path)
    except StoreOpenError as e:
        click.secho(f"Failed to load database: {e}", fg='red', err=True)
        if ctx.obj is not None and ctx.obj.verbose:
            import traceback
            click.echo(traceback.format_exc(), err=True)
        raise click.Abort()
