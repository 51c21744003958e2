"""
Angelos CLI

Command-line interface for reading human-readable messages stored in
verified smart contracts.

Commands:
  read   - Resolve a contract's message and type it out
  link   - Show the share link and explorer link for an address
  info   - Show effective configuration
"""

from __future__ import annotations

import logging
import sys
from urllib.parse import urlsplit

import click

from .config import Settings
from .sigil.address import is_address, to_checksum_address


# ============ Constants ============

VERSION = "1.0.0"


# ============ Banner ============


def _print_banner() -> None:
    """Print the Angelos CLI banner."""
    border = click.style("  ✉ ═══════════════════════════════════════ ✉", fg="cyan")
    click.echo()
    click.echo(border)
    click.echo()
    click.echo(
        click.style("          A N G E L O S", fg="bright_white", bold=True)
        + click.style(f"        v{VERSION}", dim=True)
    )
    click.secho("        ─── On-chain Message Reader ───", fg="cyan")
    click.echo()
    click.echo(border)
    click.echo()


def _mask_url(url: str) -> str:
    """Hide path-embedded API keys (Alchemy style ``/v2/<key>``)."""
    parts = urlsplit(url)
    segments = parts.path.rstrip("/").split("/")
    if len(segments) > 2 and segments[-2] == "v2" and segments[-1] != "demo":
        segments[-1] = "***"
    return f"{parts.scheme}://{parts.netloc}{'/'.join(segments)}"


# ============ Main CLI Group ============


@click.group(invoke_without_command=True)
@click.version_option(version=VERSION, prog_name="angelos")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Angelos: read messages stored in smart contracts."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
    if ctx.invoked_subcommand is None:
        _print_banner()
        click.echo(ctx.get_help())


# ============ Top-level Commands ============

from .theurgy.read import read

cli.add_command(read)


# ============ Links ============


@cli.command()
@click.argument("address")
def link(address: str) -> None:
    """Show the share link and explorer link for ADDRESS."""
    address = address.strip()
    if not is_address(address):
        click.secho("Invalid contract address format, please check and try again", fg="red")
        sys.exit(2)

    settings = Settings.from_env()
    checksummed = to_checksum_address(address)
    click.echo(f"Share:    {settings.share_link(checksummed)}")
    click.echo(f"Explorer: {settings.explorer_address_url(checksummed)}")


# ============ Info ============


@cli.command()
def info() -> None:
    """Show effective configuration."""
    _print_banner()
    settings = Settings.from_env()

    click.secho("  Network ────────────────────────────────", fg="cyan")
    click.echo()
    rows = [
        ("Chain ID:", str(settings.chain_id)),
        ("RPC:", _mask_url(settings.rpc_url)),
        ("Explorer API:", settings.explorer_api_url),
        ("Explorer key:", "set" if settings.explorer_api_key else "not set"),
        ("Explorer:", settings.explorer_url),
    ]
    for label, value in rows:
        click.echo(
            click.style(f"  {label:<14}", dim=True) + click.style(value, fg="bright_white")
        )

    click.echo()
    click.secho("  Display ────────────────────────────────", fg="cyan")
    click.echo()
    click.echo(
        click.style(f"  {'Tick:':<14}", dim=True)
        + click.style(f"{settings.tick_ms} ms", fg="bright_white")
    )
    click.echo(
        click.style(f"  {'Share base:':<14}", dim=True)
        + click.style(settings.share_url, fg="bright_white")
    )
    click.echo()


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
