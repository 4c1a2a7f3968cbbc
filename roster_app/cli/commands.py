"""
Roster Cost CLI Commands - database setup and cost reports from the shell.

Provides command-line interface for:
- Database initialization with default shift types
- Monthly cost-sharing report for all active projects
- Checking a prospective cost-sharing edge
- Auditing the stored sharing graph for cycles
- Serving the HTTP API
"""
import click
import logging

from roster_app.config import configure_logging
from roster_app.models import get_db, init_db, ensure_default_shift_types
from roster_app.infrastructure import SqlCostDataStore
from roster_app.domain.services import CostReportService, CostSharingService
from roster_app.domain.exceptions import DomainError

logger = logging.getLogger(__name__)


@click.group()
@click.version_option(version='1.0.0')
def cli():
    """Roster Cost CLI.

    Compute monthly labor cost per project from staff rosters and
    redistribute it along cost-sharing edges.
    """
    configure_logging()


@cli.command('init-db')
def init_db_command():
    """Create tables and seed default shift types."""
    init_db()
    ensure_default_shift_types()
    click.echo(click.style("✓ Database initialized", fg='green'))


@cli.command()
@click.option('--year', required=True, type=int, help='Roster year')
@click.option('--month', required=True, type=click.IntRange(1, 12), help='Roster month (1-12)')
@click.option('--sort', 'sort_by_name', is_flag=True, help='Sort projects by name')
def report(year: int, month: int, sort_by_name: bool):
    """Print the cost-sharing breakdown of every active project."""
    db = next(get_db())
    try:
        service = CostReportService(SqlCostDataStore(db))
        try:
            results = service.get_all_projects_cost_breakdown(year, month)
        except DomainError as e:
            raise click.ClickException(e.message)
    finally:
        db.close()

    if sort_by_name:
        results = sorted(results, key=lambda r: r.project_name)

    if not results:
        click.echo("No active projects")
        return

    click.echo(f"Cost report {year}-{month:02d}")
    click.echo(f"{'ID':>5}  {'Project':<30} {'Original':>14} {'Out':>12} {'In':>12} {'Net':>14}")
    click.echo("-" * 92)
    for r in results:
        click.echo(
            f"{r.project_id:>5}  {r.project_name[:30]:<30} {r.original_cost:>14,.2f} "
            f"{r.shared_out:>12,.2f} {r.shared_in:>12,.2f} {r.net_cost:>14,.2f}"
        )
    click.echo("-" * 92)
    total_original = sum(r.original_cost for r in results)
    total_net = sum(r.net_cost for r in results)
    click.echo(f"{'':>5}  {'Total':<30} {total_original:>14,.2f} {'':>12} {'':>12} {total_net:>14,.2f}")


@cli.command('validate-edge')
@click.argument('source_id', type=int)
@click.argument('destination_id', type=int)
def validate_edge(source_id: int, destination_id: int):
    """Check whether SOURCE_ID -> DESTINATION_ID can be added."""
    db = next(get_db())
    try:
        service = CostSharingService(SqlCostDataStore(db))
        try:
            service.validate_new_edge(source_id, destination_id)
        except DomainError as e:
            click.echo(click.style(f"✗ {e.message}", fg='red'))
            raise SystemExit(1)
    finally:
        db.close()

    click.echo(click.style(f"✓ Edge {source_id} -> {destination_id} is allowed", fg='green'))


@cli.command('check-graph')
def check_graph():
    """Audit stored cost-sharing edges for cycles."""
    db = next(get_db())
    try:
        cycle = CostSharingService(SqlCostDataStore(db)).find_graph_cycle()
    finally:
        db.close()

    if cycle is None:
        click.echo(click.style("✓ No cost-sharing cycles", fg='green'))
        return

    path = " -> ".join(str(p) for p in cycle + [cycle[0]])
    click.echo(click.style(f"✗ Cycle found: {path}", fg='red'))
    raise SystemExit(1)


@cli.command()
@click.option('--port', type=int, default=8000, help='Server port')
@click.option('--host', default='127.0.0.1', help='Server host')
@click.option('--reload', is_flag=True, help='Enable auto-reload')
def serve(port: int, host: str, reload: bool):
    """Start the roster cost API with uvicorn."""
    import uvicorn

    click.echo(click.style('Roster Cost App - API Server', fg='cyan', bold=True))
    click.echo(f"Starting server at http://{host}:{port}")

    uvicorn.run(
        "roster_app.main:app",
        host=host,
        port=port,
        reload=reload
    )


if __name__ == '__main__':
    cli()
