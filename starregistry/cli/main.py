# starregistry/cli/main.py
"""
CLI for issuing ownership challenges and inspecting exported star registry chains.
"""

import json
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from starregistry.chain.blockchain import Blockchain, read_snapshot
from starregistry.core.config import RegistryConfig
from starregistry.core.errors import DecodeError
from starregistry.crypto.hashing import short_hash
from starregistry.crypto.signing import WalletKey, sign_message
from starregistry.query.index import StarIndex
from starregistry.verify.ownership import OwnershipVerifier

app = typer.Typer(
    name="star-registry",
    help="Issue ownership challenges and verify exported star registry chains",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()


def load_chain(path: Path) -> Blockchain:
    """Open a JSONL snapshot or exit with a readable error."""
    if not path.exists():
        console.print(f"[red]Snapshot file not found: {path}[/]")
        raise typer.Exit(1)

    try:
        return read_snapshot(path)
    except (DecodeError, ValueError) as e:
        console.print(f"[red]Failed to read snapshot: {str(e)}[/]")
        raise typer.Exit(1)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show registry log output"),
):
    """Star registry developer tools."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )


@app.command()
def challenge(
    address: str = typer.Argument(..., help="Wallet address that will sign the challenge"),
):
    """Print a fresh ownership challenge for ADDRESS."""
    verifier = OwnershipVerifier(Blockchain(), config=RegistryConfig.from_env())
    console.print(verifier.request_message(address), highlight=False, soft_wrap=True)


@app.command("new-key")
def new_key():
    """Generate a throwaway wallet for local testing."""
    key = WalletKey.generate()
    console.print(f"[bold]address[/]     {key.address}", highlight=False)
    console.print(f"[bold]private key[/] {key.private_key}", highlight=False)
    console.print("[yellow]Testing only. Never fund this key.[/]")


@app.command()
def sign(
    message: str = typer.Argument(..., help="Challenge string to sign"),
    key: str = typer.Option(..., "--key", "-k", help="Hex private key"),
):
    """Sign a challenge with a local private key (stands in for a wallet)."""
    try:
        signature = sign_message(key, message)
    except Exception as e:
        console.print(f"[red]Signing failed: {str(e)}[/]")
        raise typer.Exit(1)
    console.print(signature, highlight=False, soft_wrap=True)


@app.command()
def verify(
    snapshot: Path = typer.Argument(..., help="JSONL chain snapshot"),
):
    """Verify digests and linkage of every block in a snapshot."""
    chain = load_chain(snapshot)
    defects = chain.validate_chain()

    if not defects:
        console.print(f"[green]✓ Chain is valid[/] ({chain.length} blocks, height {chain.get_height()})")
        return

    console.print(f"[red]✗ Validation failed ({len(defects)} defects)[/]")
    for d in defects:
        console.print(f"  • [{d.height}] {d.category}: {d.message}", highlight=False)
    raise typer.Exit(1)


@app.command()
def blocks(
    snapshot: Path = typer.Argument(..., help="JSONL chain snapshot"),
    limit: int = typer.Option(20, "--limit", "-n", help="Number of most recent blocks to show"),
):
    """Tabulate the most recent blocks in a snapshot."""
    chain = load_chain(snapshot)

    table = Table(title=f"Blocks ({chain.length} total)")
    table.add_column("Height")
    table.add_column("Hash")
    table.add_column("Previous")
    table.add_column("Timestamp")
    table.add_column("Owner")

    for block in chain.get_chain()[-limit:]:
        try:
            owner = escape(str(block.decode_body().get("owner") or "—"))
        except DecodeError:
            owner = "[red]undecodable[/]"
        table.add_row(
            str(block.height),
            short_hash(block.hash),
            short_hash(block.previous_block_hash),
            str(block.timestamp),
            owner,
        )

    console.print(table)


@app.command()
def stars(
    snapshot: Path = typer.Argument(..., help="JSONL chain snapshot"),
    address: str = typer.Argument(..., help="Owner wallet address"),
):
    """List the stars registered to ADDRESS in a snapshot."""
    chain = load_chain(snapshot)

    try:
        records = StarIndex(chain).get_stars_by_wallet_address(address)
    except DecodeError as e:
        console.print(f"[red]Snapshot contains an undecodable block: {str(e)}[/]")
        raise typer.Exit(1)

    if not records:
        console.print(f"[yellow]No stars found for {address}[/]")
        return

    for record in records:
        console.print(json.dumps(record.star, sort_keys=True), highlight=False, markup=False, soft_wrap=True)


if __name__ == "__main__":
    app()
