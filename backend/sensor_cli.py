"""Command line entry point used by PRTG's EXE/Script Advanced sensor."""
import asyncio
import logging
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from graph_client import SOURCES
from prtg_xml import render_lookup, render_report
from sensor import SensorSettings, run_sensor
from sensor_logging import configure_logging


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Debug logging on stderr.")
@click.option("--json-logs", is_flag=True, help="Log as JSON lines.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, json_logs: bool) -> None:
    """Microsoft 365 service health for PRTG."""
    configure_logging(level=logging.DEBUG if verbose else logging.INFO, json_format=json_logs)
    try:
        ctx.obj = SensorSettings.from_env()
    except ValidationError as exc:
        raise click.UsageError(f"invalid environment settings: {exc}") from exc


@cli.command()
@click.option("--client-id", help="App registration client id (env CLIENT_ID).")
@click.option("--client-secret", help="App registration secret (env CLIENT_SECRET).")
@click.option("--tenant-id", help="Tenant id or primary domain (env TENANT_ID).")
@click.option("--source", type=click.Choice(sorted(SOURCES)), help="Health API to query.")
@click.option("--timeout", type=click.FloatRange(min=0, min_open=True), help="HTTP timeout in seconds.")
@click.pass_obj
def run(settings: SensorSettings, client_id, client_secret, tenant_id, source, timeout) -> None:
    """Print the PRTG XML for the tenant's current service status."""
    overrides = {
        "client_id": client_id,
        "client_secret": client_secret,
        "tenant_id": tenant_id,
        "source": source,
        "timeout": timeout,
    }
    settings = settings.model_copy(update={k: v for k, v in overrides.items() if v is not None})
    missing = [name for name in ("client_id", "client_secret", "tenant_id")
               if not getattr(settings, name)]
    if missing:
        flags = ", ".join("--" + m.replace("_", "-") for m in missing)
        raise click.UsageError(f"missing required parameter(s): {flags}")

    report = asyncio.run(run_sensor(settings))
    click.echo(render_report(report))
    sys.exit(1 if report.failed else 0)


@cli.command()
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path),
              help="Write the .ovl file here instead of stdout.")
@click.pass_obj
def lookup(settings: SensorSettings, output) -> None:
    """Emit the PRTG value lookup matching the severity codes."""
    text = render_lookup(settings.value_lookup)
    if output is None:
        click.echo(text)
        return
    output.write_text(text + "\n", encoding="utf-8")
    click.echo(f"wrote {output}", err=True)


if __name__ == "__main__":
    cli()
