"""
Miscellaneous CLI commands (info, serve).
"""
import sys

import click

from vscdb_recover.core.config import (
    get_cursor_global_storage_path,
    get_cursor_workspace_storage_path,
)


@click.command()
def info():
    """Show default Cursor storage locations."""
    global_db = get_cursor_global_storage_path()
    workspace_dir = get_cursor_workspace_storage_path()

    click.echo(f"Python: {sys.version}")
    click.echo(f"Platform: {sys.platform}")

    click.echo(f"\nGlobal database: {global_db}")
    if global_db.exists():
        click.echo(f"  Size: {global_db.stat().st_size / 1024:.1f} KB")
    else:
        click.echo("  (not found)")

    click.echo(f"\nWorkspace storage: {workspace_dir}")
    if workspace_dir.is_dir():
        databases = sorted(workspace_dir.glob("*/state.vscdb"))
        click.echo(f"  Workspace databases: {len(databases)}")
    else:
        click.echo("  (not found)")


@click.command()
@click.option('--host', default='127.0.0.1', help='Host to bind to')
@click.option('--port', default=8000, type=int, help='Port to bind to')
@click.option('--reload', is_flag=True, help='Reload on code changes')
def serve(host, port, reload):
    """Run the extraction HTTP API."""
    import uvicorn

    click.echo(f"Starting API on http://{host}:{port}")
    uvicorn.run("vscdb_recover.api.main:app", host=host, port=port, reload=reload)
