"""Command-line interface for wakelan."""

import logging
import sys
from pathlib import Path
from typing import Callable, Optional

import click

from wakelan import __version__
from wakelan.core.errors import ConfigError, TransportError, ValidationError
from wakelan.core.wol import DEFAULT_BROADCAST_IP, WolTarget

DEFAULT_CONFIG = Path.home() / ".config" / "wakelan" / "config.yaml"

EXIT_CONFIG_ERROR = 1
EXIT_SEND_FAILED = 2

TROUBLESHOOTING = (
    "If the target machine does not power on, check:",
    "  1. Wake-on-LAN is enabled in the target's BIOS/UEFI",
    "  2. The network adapter's power management allows wake-up",
    "  3. The MAC address and broadcast IP are correct",
    "  4. Firewall and router settings let the broadcast through",
)


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
        datefmt="%H:%M:%S",
    )


def _load_target(
    config: str,
    mac: Optional[str],
    broadcast_ip: Optional[str],
    port: Optional[str],
) -> WolTarget:
    """Build the target from the config file, letting command-line values win."""
    if mac is not None and port is not None:
        return WolTarget(
            mac_address=mac,
            broadcast_ip=broadcast_ip if broadcast_ip is not None else DEFAULT_BROADCAST_IP,
            port=port,
        )

    from wakelan.config.loader import read_target

    try:
        target = read_target(Path(config))
    except ConfigError as exc:
        click.echo(f"Failed to read config file: {exc}", err=True)
        sys.exit(EXIT_CONFIG_ERROR)

    if mac is not None:
        target.mac_address = mac
    if broadcast_ip is not None:
        target.broadcast_ip = broadcast_ip
    if port is not None:
        target.port = port
    return target


def _target_options(func: Callable[..., None]) -> Callable[..., None]:
    func = click.option("--port", "-p", help="UDP port, overrides the config")(func)
    func = click.option("--ip", "broadcast_ip", help="Broadcast IPv4 address, overrides the config")(func)
    func = click.option("--mac", "-m", help="Target MAC address (XX-XX-XX-XX-XX-XX)")(func)
    return func


# ── Root group ────────────────────────────────────────────────────────────────


@click.group()
@click.version_option(version=__version__, prog_name="wakelan")
@click.option(
    "--config",
    "-c",
    default=str(DEFAULT_CONFIG),
    envvar="WAKELAN_CONFIG",
    show_default=True,
    help="Path to wakelan config.yaml",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, config: str, verbose: bool) -> None:
    """wakelan — send Wake-on-LAN magic packets."""
    _setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["config"] = config


# ── send command ──────────────────────────────────────────────────────────────


@main.command()
@_target_options
@click.pass_context
def send(
    ctx: click.Context,
    mac: Optional[str],
    broadcast_ip: Optional[str],
    port: Optional[str],
) -> None:
    """Send a magic packet to the configured machine."""
    target = _load_target(ctx.obj["config"], mac, broadcast_ip, port)

    click.echo("=== Wake-on-LAN ===")
    click.echo(f"Target MAC:   {target.mac_address}")
    click.echo(f"Broadcast IP: {target.broadcast_ip}")
    click.echo(f"Port:         {target.port}")
    click.echo("=" * 32)

    from wakelan.core.wol import wake

    try:
        wake(target)
    except ValidationError as exc:
        click.echo(f"✗  Invalid setting: {exc}", err=True)
        sys.exit(EXIT_CONFIG_ERROR)
    except TransportError as exc:
        detail = f" ({exc.__cause__})" if exc.__cause__ else ""
        click.echo(f"✗  Packet send failed: {exc}{detail}", err=True)
        sys.exit(EXIT_SEND_FAILED)

    click.echo("✓  Magic packet sent.")
    for line in TROUBLESHOOTING:
        click.echo(line)


# ── check command ─────────────────────────────────────────────────────────────


@main.command()
@click.pass_context
def check(ctx: click.Context) -> None:
    """Validate the config file without sending anything."""
    import yaml

    from wakelan.config.loader import load_config, target_from_config, validate_config

    path = Path(ctx.obj["config"])
    if not path.exists():
        click.echo(f"Config file not found: {path}", err=True)
        sys.exit(EXIT_CONFIG_ERROR)
    try:
        raw = load_config(path)
    except yaml.YAMLError as exc:
        click.echo(f"Config file is not valid YAML: {exc}", err=True)
        sys.exit(EXIT_CONFIG_ERROR)
    except (OSError, UnicodeDecodeError) as exc:
        click.echo(f"Config file cannot be read: {exc}", err=True)
        sys.exit(EXIT_CONFIG_ERROR)
    if not raw:
        click.echo("Config file is empty.", err=True)
        sys.exit(EXIT_CONFIG_ERROR)

    errors = validate_config(raw)
    if errors:
        click.echo("Config validation errors:", err=True)
        for e in errors:
            click.echo(f"  • {e}", err=True)
        sys.exit(EXIT_CONFIG_ERROR)

    target = target_from_config(raw)
    click.echo(
        f"✓  Config OK: {target.mac_address} via {target.broadcast_ip}:{target.port}"
    )


# ── init command ──────────────────────────────────────────────────────────────


@main.command()
@click.option("--mac", "-m", required=True, help="Target MAC address (XX-XX-XX-XX-XX-XX)")
@click.option(
    "--ip",
    "broadcast_ip",
    default=DEFAULT_BROADCAST_IP,
    show_default=True,
    help="Broadcast IPv4 address",
)
@click.option("--port", "-p", required=True, help="UDP port (usually 7 or 9)")
@click.option("--force", is_flag=True, help="Overwrite an existing config file")
@click.pass_context
def init(ctx: click.Context, mac: str, broadcast_ip: str, port: str, force: bool) -> None:
    """Write a config file for one target machine."""
    from wakelan.config.writer import write_config
    from wakelan.core.validate import validate_ipv4, validate_mac, validate_port

    path = Path(ctx.obj["config"])
    if path.exists() and not force:
        click.echo(f"Config file already exists: {path} (use --force to overwrite)", err=True)
        sys.exit(EXIT_CONFIG_ERROR)

    try:
        validate_mac(mac)
        validate_ipv4(broadcast_ip)
        validate_port(port)
    except ValidationError as exc:
        click.echo(f"✗  Invalid setting: {exc}", err=True)
        sys.exit(EXIT_CONFIG_ERROR)

    target = WolTarget(mac_address=mac, broadcast_ip=broadcast_ip, port=port)
    write_config(path, target)
    click.echo(f"Config written to {path}")


if __name__ == "__main__":
    main()
