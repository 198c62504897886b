"""
Extraction CLI commands (extract, tables, search).

Commands for reading a ``state.vscdb`` file, printing or exporting the
recovered conversation, and inspecting which keys were found.
"""
from pathlib import Path

import click

from vscdb_recover.cli.common import db_argument, role_option, run_extraction
from vscdb_recover.services.exporter import (
    ExportMode,
    build_export_payload,
    export_filename,
    write_export,
)
from vscdb_recover.services.search import filter_messages, search_messages, summarize


@click.command()
@db_argument
@click.option(
    '--output', '-o',
    type=click.Path(dir_okay=True, writable=True),
    help='Write a JSON export to this file (or into this directory)',
)
@click.option(
    '--mode',
    type=click.Choice([mode.value for mode in ExportMode]),
    default=ExportMode.CONVERSATION.value,
    help='Export shape: messages only, or raw entries plus messages',
)
@role_option
@click.option('--query', '-q', default='', help='Only show messages containing this text')
@click.pass_context
def extract(ctx, db_path, output, mode, role, query):
    """Recover the conversation stored in DB_PATH."""
    result = run_extraction(ctx, db_path)

    if output:
        target = Path(output)
        if target.is_dir():
            target = target / export_filename(db_path, mode)
        payload = build_export_payload(result, mode, filename=Path(db_path).name)
        write_export(target, payload)
        click.secho(f"Exported {len(result.messages)} messages to {target}", fg='green')
        return

    if not result.messages:
        click.secho("No conversation data found.", fg='yellow')
        click.echo(f"  Tables: {', '.join(result.tables) or '(none)'}")
        click.echo(f"  Raw keys: {len(result.raw)}")
        return

    click.secho(summarize(result.messages), fg='green')
    click.echo()

    for message in filter_messages(result.messages, query=query, role=role):
        label = "You" if message.role.value == "user" else "AI"
        header = f"[{message.id}] {label}"
        if message.timestamp:
            header += f" ({message.timestamp})"
        click.secho(header, bold=True)
        click.echo(message.text)
        click.echo()


@click.command()
@db_argument
@click.pass_context
def tables(ctx, db_path):
    """List tables and conversation-relevant keys found in DB_PATH."""
    result = run_extraction(ctx, db_path)

    click.echo(f"Tables ({len(result.tables)}):")
    for name in result.tables:
        click.echo(f"  {name}")

    click.echo(f"\nKeys ({len(result.raw)}):")
    for key in result.raw:
        click.echo(f"  {key}")

    stats = result.stats
    click.echo(
        f"\nRows read: {result.scan_report.rows_read}, "
        f"skipped: {stats['scan']['skipped']}, errors: {stats['scan']['errors']}"
    )
    strategy = result.build_report.strategy or 'none'
    click.echo(f"Strategy: {strategy}, messages: {stats['build']['emitted']}")


@click.command()
@db_argument
@click.argument('query')
@click.option('--limit', default=10, help='Maximum number of results')
@click.pass_context
def search(ctx, db_path, query, limit):
    """Search recovered messages in DB_PATH for QUERY."""
    result = run_extraction(ctx, db_path)
    hits = search_messages(result.messages, query, max_results=limit)

    if not hits:
        click.echo(f"No messages found matching '{query}'")
        return

    click.secho(f"\nFound {len(hits)} messages matching '{query}':\n", fg='green')
    for hit in hits:
        click.echo(f"[{hit.message.id}] {hit.message.role.value}")
        click.echo(f"  ...{hit.snippet}...")
        click.echo()
