"""
CLI Commands

``flask reregister`` is the boot-completed hook: wire it into whatever runs
after the device or host restarts.
"""

import click
from flask import current_app
from flask.cli import with_appcontext

from geovisits.container import get_services
from geovisits.monitor.base import TransitionKind


@click.command('reregister')
@with_appcontext
def reregister_command():
    """Re-register every persisted zone with the region monitor."""
    results = get_services(current_app).coordinator.reregister_all()
    for result in results:
        if result.monitored:
            click.echo(f'zone {result.zone_id}: registered')
        else:
            click.echo(f'zone {result.zone_id}: FAILED ({result.error})')
    click.echo(f'{sum(r.monitored for r in results)}/{len(results)} zone(s) registered')


@click.command('transition')
@click.argument('zone_id', type=int)
@click.argument('kind', type=click.Choice([k.value for k in TransitionKind], case_sensitive=False))
@with_appcontext
def transition_command(zone_id, kind):
    """Deliver an ENTER/EXIT transition for ZONE_ID."""
    visit = get_services(current_app).transitions.deliver(zone_id, kind)
    if visit is None:
        click.echo(f'{kind} for zone {zone_id} ignored')
    else:
        click.echo(f'{kind} for zone {zone_id} recorded as visit {visit.id}')


def register_commands(app):
    app.cli.add_command(reregister_command)
    app.cli.add_command(transition_command)
