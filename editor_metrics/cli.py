"""
Command line interface for editor-metrics.

Useful for checking a tracking setup by hand:

    editor-metrics client-id
    editor-metrics send google --tracking-id UA-1234-1 -c editor -a save --dry-run
"""

import asyncio
import sys

import click
import httpx

from editor_metrics import config
from editor_metrics.exceptions import EditorMetricsError
from editor_metrics.host import LocalHost
from editor_metrics.identity import derive_client_id
from editor_metrics.tracker import MetricsTracker
from editor_metrics.transport import build_request_url
from editor_metrics.types import MetricsEvent, Provider, TrackingConfig


@click.group()
@click.option('--debug', is_flag=True, help='Enable debug logging')
def cli(debug):
    """Send editor analytics events."""
    config.setup_logging(debug or config.DEBUG)


@cli.command('client-id')
def client_id():
    """Print this machine's client ID."""
    click.echo(asyncio.run(derive_client_id(LocalHost())))


@cli.command()
@click.argument('provider', type=click.Choice([p.value for p in Provider]))
@click.option('-c', '--category', required=True, help='Event category')
@click.option('-a', '--action', required=True, help='Event action')
@click.option('-l', '--label', help='Event label')
@click.option('-v', '--value', type=float, help='Event value (integer or decimal)')
@click.option('--tracking-id', help='Google Analytics property id')
@click.option('--site-id', help='Matomo site id')
@click.option('--endpoint', help='Override the provider endpoint')
@click.option('--ip', 'ip_override', help='IP address to report')
@click.option('--cache-buster', is_flag=True, help='Add a random cache-busting parameter')
@click.option('--dry-run/--no-dry-run', default=None,
              help='Print the request without sending it')
def send(provider, category, action, label, value, tracking_id, site_id,
         endpoint, ip_override, cache_buster, dry_run):
    """Send a single event to PROVIDER."""
    if value is not None and value.is_integer():
        value = int(value)
    tracking_config = TrackingConfig(
        ip_override=ip_override,
        cache_buster=cache_buster,
        dry_run=dry_run,
    )
    event = MetricsEvent(category=category, action=action, label=label, value=value)

    try:
        tracker = MetricsTracker(
            provider,
            config=tracking_config,
            tracking_id=tracking_id,
            site_id=site_id,
            base_url=endpoint,
        )
    except EditorMetricsError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(2)

    async def _send():
        params = await tracker.build_params(event)
        click.echo(build_request_url(tracker.base_url, params))
        return await tracker.track(event, params=params)

    try:
        sent = asyncio.run(_send())
    except httpx.RequestError as e:
        click.echo(f"Error: request failed: {e}", err=True)
        sys.exit(1)

    if not sent:
        click.echo("Tracking is disabled (DO_NOT_TRACK)", err=True)
        sys.exit(1)


def main():
    cli()


if __name__ == '__main__':
    main()
