"""CLI entry point for the bdkrpc tool.

This module is the composition root of the application: it is the only place
that reads environment variables and turns command-line options into a
credential strategy and a :class:`~bdkrpc.client.Client`.
"""

import json
import logging
import sys
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum

# Ensure UTF-8 output on Windows where stdout may default to cp1252.
# reconfigure() is a no-op when encoding is already utf-8.
if hasattr(sys.stdout, "reconfigure"):
    sys.stdout.reconfigure(encoding="utf-8", errors="replace")
if hasattr(sys.stderr, "reconfigure"):
    sys.stderr.reconfigure(encoding="utf-8", errors="replace")

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from bdkrpc.auth import Auth, CookieFile, NoAuth, UserPass, default_cookie_path
from bdkrpc.client import Client
from bdkrpc.core.exceptions import AuthenticationRejectedError, BdkRpcError
from bdkrpc.core.models import BlockchainInfo
from bdkrpc.transport.http import DEFAULT_TIMEOUT, redact_url

app = typer.Typer(help="Query a Bitcoin Core node over JSON-RPC.")
auth_app = typer.Typer(help="Inspect RPC authentication.")

app.add_typer(auth_app, name="auth")

console = Console(legacy_windows=False)
err_console = Console(stderr=True, legacy_windows=False)

_DEFAULT_URL = "http://localhost:18443"
_AUTO = "auto"


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------


class OutputFormat(str, Enum):
    """Supported output formats for structured results."""

    table = "table"
    json = "json"


@dataclass
class ConnectionOptions:
    """Global options shared by every command."""

    url: str
    user: str | None
    password: str | None
    cookie: str | None
    network: str
    datadir: str | None
    timeout: float


@app.callback()
def main(
    ctx: typer.Context,
    url: str = typer.Option(
        _DEFAULT_URL, "--url", envvar="BITCOIN_RPC_URL", help="Node RPC URL."
    ),
    user: str | None = typer.Option(
        None, "--user", "-u", envvar="BITCOIN_RPC_USER", help="RPC user."
    ),
    password: str | None = typer.Option(
        None, "--password", "-p", envvar="BITCOIN_RPC_PASS", help="RPC password."
    ),
    cookie: str | None = typer.Option(
        None,
        "--cookie",
        envvar="BITCOIN_RPC_COOKIE",
        help="Path to the node's .cookie file, or 'auto' for the default path.",
    ),
    network: str = typer.Option(
        "main", "--network", "-n", help="Network used to locate the cookie."
    ),
    datadir: str | None = typer.Option(
        None, "--datadir", help="Node data directory used to locate the cookie."
    ),
    timeout: float = typer.Option(
        DEFAULT_TIMEOUT,
        "--timeout",
        envvar="BITCOIN_RPC_TIMEOUT",
        help="Per-request timeout in seconds.",
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Log requests to stderr."
    ),
):
    """Query a Bitcoin Core node over JSON-RPC."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=err_console, show_path=False)],
        )
    ctx.obj = ConnectionOptions(
        url=url,
        user=user,
        password=password,
        cookie=cookie,
        network=network,
        datadir=datadir,
        timeout=timeout,
    )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _resolve_auth(opts: ConnectionOptions) -> Auth:
    """Pick the credential strategy for *opts*.

    A cookie option wins over a user/password pair.  With neither, the
    returned :class:`NoAuth` makes client construction fail.

    Raises:
        ValueError: If ``--cookie auto`` is combined with an unknown network.
    """
    if opts.cookie:
        if opts.cookie == _AUTO:
            return CookieFile(default_cookie_path(opts.network, opts.datadir))
        return CookieFile(opts.cookie)
    if opts.user:
        return UserPass(opts.user, opts.password or "")
    return NoAuth()


def _get_client(opts: ConnectionOptions) -> Client:
    """Build a :class:`Client` from the global options.

    Raises:
        BdkRpcError: If construction fails.
    """
    return Client.with_auth(opts.url, _resolve_auth(opts), timeout=opts.timeout)


@contextmanager
def _rpc_errors():
    """Turn library and option errors into a red message and exit code 1."""
    try:
        yield
    except AuthenticationRejectedError as e:
        console.print(f"[red]✗ {escape(str(e))}[/red]")
        console.print("Check --user/--password or --cookie.")
        raise typer.Exit(1)
    except (BdkRpcError, ValueError) as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


def _parse_param(raw: str):
    """Decode a CLI parameter as JSON, falling back to the raw string."""
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def _info_dict(info: BlockchainInfo) -> dict:
    return {
        "chain": info.chain,
        "blocks": info.blocks,
        "headers": info.headers,
        "bestblockhash": str(info.best_block_hash),
        "difficulty": info.difficulty,
        "verificationprogress": info.verification_progress,
        "initialblockdownload": info.initial_block_download,
        "pruned": info.pruned,
    }


# ---------------------------------------------------------------------------
# auth commands
# ---------------------------------------------------------------------------


@auth_app.command()
def status(ctx: typer.Context):
    """Show which credentials are used and check them against the node."""
    opts: ConnectionOptions = ctx.obj
    with _rpc_errors():
        auth = _resolve_auth(opts)

    if isinstance(auth, NoAuth):
        console.print("[yellow]No credentials configured.[/yellow]")
        console.print(
            "Pass [bold]--user/--password[/bold] or [bold]--cookie[/bold], "
            "or set BITCOIN_RPC_USER/BITCOIN_RPC_PASS or BITCOIN_RPC_COOKIE."
        )
        raise typer.Exit(1)

    if not auth.is_authenticated():
        console.print(f"[red]✗ Cannot resolve {escape(auth.describe())}.[/red]")
        with _rpc_errors():
            auth.get_credentials()

    console.print(f"[green]✓ Using {escape(auth.describe())}[/green]")
    console.print(f"[dim]Validating with {escape(redact_url(opts.url))}...[/dim]")
    with _rpc_errors():
        height = _get_client(opts).get_block_count()
    console.print(f"[green]✓ Credentials accepted.[/green] Block height: {height}")


@auth_app.command("cookie-path")
def cookie_path(ctx: typer.Context):
    """Print where the node writes its cookie for --network / --datadir."""
    opts: ConnectionOptions = ctx.obj
    with _rpc_errors():
        path = default_cookie_path(opts.network, opts.datadir)
    print(path)


# ---------------------------------------------------------------------------
# rpc commands
# ---------------------------------------------------------------------------


@app.command()
def bestblockhash(ctx: typer.Context):
    """Print the hash of the best (tip) block."""
    with _rpc_errors():
        block_hash = _get_client(ctx.obj).get_best_block_hash()
    print(block_hash)


@app.command()
def blockcount(ctx: typer.Context):
    """Print the current block height."""
    with _rpc_errors():
        count = _get_client(ctx.obj).get_block_count()
    print(count)


@app.command()
def blockhash(ctx: typer.Context, height: int):
    """Print the hash of the block at HEIGHT."""
    with _rpc_errors():
        block_hash = _get_client(ctx.obj).get_block_hash(height)
    print(block_hash)


@app.command()
def info(
    ctx: typer.Context,
    output: OutputFormat = typer.Option(
        OutputFormat.table, "--output", "-o", help="Output format."
    ),
):
    """Display the node's chain state."""
    with _rpc_errors():
        chain_info = _get_client(ctx.obj).get_blockchain_info()

    data = _info_dict(chain_info)
    if output == OutputFormat.json:
        print(json.dumps(data, indent=2))
        return

    table = Table(title=f"Blockchain ({chain_info.chain})")
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    for key, value in data.items():
        table.add_row(key, str(value))
    console.print(table)


@app.command()
def call(
    ctx: typer.Context,
    method: str,
    params: list[str] | None = typer.Argument(
        None, help="Positional parameters, parsed as JSON when possible."
    ),
):
    """Invoke METHOD with PARAMS and print the raw JSON result."""
    parsed = [_parse_param(p) for p in params or []]
    with _rpc_errors():
        result = _get_client(ctx.obj).call(method, *parsed)
    print(json.dumps(result, indent=2))
