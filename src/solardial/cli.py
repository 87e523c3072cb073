"""Command-line interface for Solar Dial."""

import json
from dataclasses import replace
from datetime import datetime, time
from pathlib import Path
from typing import Optional

import click
import yaml

from solardial import __version__
from solardial.config import Config, load_config
from solardial.dst import effective_timezone
from solardial.locations import ConfigurationError, LocationResolver
from solardial.logger import setup_logger
from solardial.main import SolarDialEngine, local_time, resolve_location
from solardial.models import Location
from solardial.render import TextDialRenderer, format_clock, format_day_fraction
from solardial.solar import DegenerateGeometryError, daylight
from solardial.table import build_daily_table

USAGE = (
    "Use: solardial COMMAND latitude longitude timezone [hometimezone]\n"
    "Or:  solardial COMMAND locationname [hometimezone]\n\n"
    "Longitude is positive east, "
    "an explicit timezone must include daylight saving time."
)

# Negative coordinates look like short options; pass them through as arguments.
LOCATION_CONTEXT = {"ignore_unknown_options": True}

location_args = click.argument("location", nargs=-1)
date_option = click.option(
    "--date", "day", type=click.DateTime(formats=["%Y-%m-%d"]), help="Civil date"
)


def _number(value: str, what: str) -> float:
    try:
        return float(value)
    except ValueError:
        raise click.BadParameter(f"{what} must be a number, got '{value}'")


def apply_location_args(config: Config, args: tuple) -> Config:
    """Override the configured location from positional arguments.

    One or two arguments are a location name and an optional home
    timezone; three or four are latitude, longitude, timezone and an
    optional home timezone.
    """
    if not args:
        return config
    if len(args) <= 2:
        changes = {
            "name": args[0],
            "latitude": None,
            "longitude": None,
            "timezone": None,
        }
        if len(args) == 2:
            changes["home_timezone"] = _number(args[1], "home timezone")
    elif len(args) <= 4:
        changes = {
            "latitude": _number(args[0], "latitude"),
            "longitude": _number(args[1], "longitude"),
            "timezone": _number(args[2], "timezone"),
        }
        if len(args) == 4:
            changes["home_timezone"] = _number(args[3], "home timezone")
    else:
        raise click.UsageError(USAGE)

    try:
        config.location = replace(config.location, **changes)
    except ValueError as e:
        raise click.BadParameter(str(e))
    return config


def _load(ctx: click.Context, args: tuple) -> Config:
    config = load_config(ctx.obj.get("config_path"))
    setup_logger(config.logging)
    return apply_location_args(config, args)


def _fail_unknown_location(
    ctx: click.Context, config: Config, error: ConfigurationError
) -> None:
    """Report an unresolvable location with the known names and exit 1."""
    click.echo(f"{error}\n", err=True)
    click.echo(USAGE + "\n", err=True)
    known = error.known or (
        LocationResolver.default(config.location.dataset).known_names()
    )
    click.echo("Currently known locations are: " + " ".join(known), err=True)
    ctx.exit(1)


def _resolve(ctx: click.Context, config: Config) -> Location:
    try:
        return resolve_location(config)
    except ConfigurationError as e:
        _fail_unknown_location(ctx, config, e)


def _engine(ctx: click.Context, config: Config) -> SolarDialEngine:
    try:
        return SolarDialEngine.from_config(config, renderer=TextDialRenderer())
    except ConfigurationError as e:
        _fail_unknown_location(ctx, config, e)


@click.group()
@click.version_option(version=__version__, prog_name="solardial")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path]) -> None:
    """Solar Dial.

    Wall-clock time, solar time and the Sun's position for a location.
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


@cli.command(context_settings=LOCATION_CONTEXT)
@location_args
@click.pass_context
def now(ctx: click.Context, location: tuple) -> None:
    """Show the current solar readout once."""
    config = _load(ctx, location)
    engine = _engine(ctx, config)

    try:
        engine.refresh()
    except DegenerateGeometryError as e:
        click.echo(f"Solar position undefined: {e}", err=True)
        ctx.exit(1)


@cli.command(context_settings=LOCATION_CONTEXT)
@location_args
@click.pass_context
def run(ctx: click.Context, location: tuple) -> None:
    """Refresh the readout continuously."""
    config = _load(ctx, location)
    engine = _engine(ctx, config)

    click.echo(f"Starting Solar Dial for {engine.location.name}...")
    click.echo(f"  Refresh interval: {config.refresh.interval_seconds:g}s")
    click.echo("\nPress Ctrl+C to stop.\n")

    try:
        engine.run_daemon(config)
    except KeyboardInterrupt:
        click.echo("\nShutting down...")
    finally:
        engine.stop()


def _day_and_timezone(
    loc: Location,
    config: Config,
    day: Optional[datetime],
    now: Optional[datetime] = None,
) -> tuple:
    """Civil date and its effective timezone, DST evaluated at local noon.

    Without an explicit date the location's current civil date is used,
    the same date a refresh would build its table for.
    """
    home_timezone = config.location.home_timezone
    if day is not None:
        day = day.date()
    else:
        local, _ = local_time(loc, now or datetime.now(), home_timezone)
        day = local.date()
    tz = effective_timezone(loc, datetime.combine(day, time(12)), home_timezone)
    return day, tz


@cli.command(context_settings=LOCATION_CONTEXT)
@location_args
@date_option
@click.option(
    "--step", type=click.IntRange(1, 1440), default=60, help="Minutes between rows"
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def table(
    ctx: click.Context,
    location: tuple,
    day: Optional[datetime],
    step: int,
    as_json: bool,
) -> None:
    """Print the per-minute solar table for a day."""
    config = _load(ctx, location)
    loc = _resolve(ctx, config)
    day, tz = _day_and_timezone(loc, config, day)

    try:
        daily = build_daily_table(day, loc.latitude, loc.longitude, tz)
    except DegenerateGeometryError as e:
        click.echo(f"Solar position undefined: {e}", err=True)
        ctx.exit(1)

    if as_json:
        data = daily.to_dict(step=step)
        data["location"] = loc.name
        data["timezone"] = tz
        click.echo(json.dumps(data, indent=2, ensure_ascii=False))
        return

    click.echo(f"{loc.name} {day.isoformat()} UTC{tz:+g}\n")
    click.echo("clock  solar  elevation  corrected  azimuth  longitude")
    for minute in range(0, len(daily), step):
        s = daily.sample(minute)
        click.echo(
            f"{format_clock(minute)}  {format_clock(s.solar_time_minutes)}"
            f"  {s.elevation_deg:+9.3f}  {s.corrected_elevation_deg:+9.3f}"
            f"  {s.azimuth_deg:7.2f}  {s.apparent_longitude_deg % 360:9.3f}"
        )


@cli.command("daylight", context_settings=LOCATION_CONTEXT)
@location_args
@date_option
@click.pass_context
def daylight_cmd(
    ctx: click.Context, location: tuple, day: Optional[datetime]
) -> None:
    """Show sunrise, solar noon and sunset."""
    config = _load(ctx, location)
    loc = _resolve(ctx, config)
    day, tz = _day_and_timezone(loc, config, day)

    try:
        info = daylight(day, loc.latitude, loc.longitude, tz)
    except DegenerateGeometryError as e:
        click.echo(f"Sunrise and sunset undefined: {e}", err=True)
        ctx.exit(1)

    click.echo(f"{loc.name} {day.isoformat()} UTC{tz:+g}")
    click.echo(f"  Sunrise:    {format_day_fraction(info.sunrise)}")
    click.echo(f"  Solar noon: {format_day_fraction(info.solar_noon)}")
    click.echo(f"  Sunset:     {format_day_fraction(info.sunset)}")
    hours, minutes = divmod(int(round(info.duration_minutes)), 60)
    click.echo(f"  Daylight:   {hours}h {minutes:02d}m")
    if info.polar:
        click.echo(f"  Polar {info.polar}: the Sun does not cross the horizon")


@cli.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def locations(ctx: click.Context, as_json: bool) -> None:
    """List known locations."""
    config = load_config(ctx.obj.get("config_path"))
    names = LocationResolver.default(config.location.dataset).known_names()

    if as_json:
        click.echo(json.dumps(names, indent=2, ensure_ascii=False))
        return

    click.echo("Currently known locations are: " + " ".join(names))


@cli.command("config")
@click.option("--show", is_flag=True, help="Show current configuration")
@click.option("--create", is_flag=True, help="Create default configuration file")
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    default=Path("config/config.yaml"),
    help="Output path for configuration file",
)
@click.pass_context
def config_cmd(
    ctx: click.Context, show: bool, create: bool, output: Path
) -> None:
    """Manage configuration."""
    config_path = ctx.obj.get("config_path")

    if show:
        config = load_config(config_path)
        click.echo(yaml.dump(config.to_dict(), default_flow_style=False, allow_unicode=True))
        return

    if create:
        if output.exists():
            if not click.confirm(f"{output} already exists. Overwrite?"):
                return

        config = Config()
        output.parent.mkdir(parents=True, exist_ok=True)

        with open(output, "w", encoding="utf-8") as f:
            yaml.dump(
                config.to_dict(), f, default_flow_style=False, allow_unicode=True
            )

        click.echo(f"Configuration file created: {output}")
        return

    ctx.invoke(config_cmd, show=True)


if __name__ == "__main__":
    cli()
