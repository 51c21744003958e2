"""
Theurgy Read - Resolve a contract's message and type it out.

Validates the address, checks the contract exists, fetches its verified
ABI, calls the first zero-argument string getter and reveals the result
one character at a time.
"""

from __future__ import annotations

import asyncio
import sys
from typing import Optional

import click

from ..config import Settings
from ..session import MessageResolved, ReadingSession, ResolutionFailed


async def _read(session: ReadingSession, address: str, instant: bool) -> int:
    outcome = await session.submit(address)

    if isinstance(outcome, ResolutionFailed):
        click.secho(str(outcome.error), fg="red")
        return outcome.error.exit_code
    if not isinstance(outcome, MessageResolved):
        return 1

    message = outcome.message
    if instant:
        session.close()
        click.echo(message.text)
    else:
        printed = 0
        async for state in outcome.reveal:
            click.echo(state.text[printed:], nl=False)
            printed = len(state.text)
        click.echo()

    settings = session.settings
    click.echo("")
    click.secho(f"  via {message.function_name}() on chain {message.chain_id}", dim=True)
    click.secho(f"  Share:    {settings.share_link(message.address)}", dim=True)
    click.secho(f"  Explorer: {settings.explorer_address_url(message.address)}", dim=True)
    return 0


@click.command()
@click.argument("address")
@click.option(
    "--rpc-url",
    envvar="ANGELOS_RPC_URL",
    default=None,
    help="JSON-RPC endpoint (default: Alchemy mainnet)",
)
@click.option(
    "--explorer-api-url",
    envvar="ANGELOS_EXPLORER_API_URL",
    default=None,
    help="Explorer API endpoint",
)
@click.option("--chain-id", envvar="ANGELOS_CHAIN_ID", type=int, default=None, help="Chain ID")
@click.option(
    "--tick-ms",
    envvar="ANGELOS_TICK_MS",
    type=click.IntRange(min=0),
    default=None,
    help="Delay between revealed characters",
)
@click.option("--instant", is_flag=True, help="Print the message at once")
def read(
    address: str,
    rpc_url: Optional[str],
    explorer_api_url: Optional[str],
    chain_id: Optional[int],
    tick_ms: Optional[int],
    instant: bool,
) -> None:
    """
    Read the message stored in the contract at ADDRESS.

    The contract must be verified on the explorer and expose a
    zero-argument view function returning a string.
    """
    settings = Settings.from_env().override(
        rpc_url=rpc_url,
        explorer_api_url=explorer_api_url,
        chain_id=chain_id,
        tick_ms=tick_ms,
    )
    session = ReadingSession(settings)

    try:
        code = asyncio.run(_read(session, address.strip(), instant))
    except KeyboardInterrupt:
        session.close()
        click.echo("")
        sys.exit(130)

    if code:
        sys.exit(code)
