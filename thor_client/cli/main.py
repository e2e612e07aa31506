"""
ThorClient - Command Line Interface
=====================================
CLI per query di chain, transazioni e contratto Prototype.

Security Level: MEDIUM
Last Updated: 2026-10-17
Version: 1.0.0

Commands:
- chain-tag / best-block: Query chain
- tx: Lookup transazioni e receipt
- transfer: Trasferimenti VET / VTHO
- mpp: Operazioni multi-party payment (Prototype)
- key: Utility chiavi

La chiave privata si passa con --private-key, THORCLIENT_PRIVATE_KEY o
prompt nascosto; non viene mai stampata.
"""

from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from thor_client.config import ClientSettings, get_settings, override_settings
from thor_client.constants import CLIENT_NAME, SOFTWARE_VERSION
from thor_client.domain.addressing import Address
from thor_client.domain.amount import Amount, VET, VTHO
from thor_client.domain.keypairs import ECKeyPair
from thor_client.errors import ThorClientException
from thor_client.logging_setup import setup_logging
from thor_client.network.transport import HttpTransport
from thor_client.services.contract_service import ContractService
from thor_client.services.prototype_service import PrototypeService
from thor_client.services.transaction_service import TransactionService


# ============================================================================
# CLI APP
# ============================================================================

app = typer.Typer(
    name="thorclient",
    help="ThorClient - VeChain Thor client CLI",
    add_completion=False
)

console = Console()


# ============================================================================
# GLOBAL STATE
# ============================================================================

class CLIState:
    """Global CLI state"""
    config: Optional[ClientSettings] = None
    transport: Optional[HttpTransport] = None

    def settings(self) -> ClientSettings:
        if self.config is None:
            self.config = get_settings()
        return self.config

    def http(self) -> HttpTransport:
        if self.transport is None:
            self.transport = HttpTransport.from_settings(self.settings())
        return self.transport

    def contracts(self) -> ContractService:
        return ContractService(self.http(), config=self.settings())

    def transactions(self) -> TransactionService:
        return TransactionService(self.http(), config=self.settings())

    def prototype(self) -> PrototypeService:
        return PrototypeService(self.contracts())


state = CLIState()


def _fail(error: ThorClientException) -> None:
    console.print(f"[red]Error ({error.code}): {escape(error.message)}[/red]")
    raise typer.Exit(1)


def _load_key(private_key: Optional[str]) -> ECKeyPair:
    if not private_key:
        private_key = typer.prompt("Private key (hex)", hide_input=True)
    return ECKeyPair.from_hex(private_key)


PRIVATE_KEY_OPTION = typer.Option(
    None,
    "--private-key",
    envvar="THORCLIENT_PRIVATE_KEY",
    help="Sender private key (hex); prompted if omitted",
    show_default=False,
)


@app.callback()
def main(
    node_url: Optional[str] = typer.Option(None, "--node-url", "-u", help="Node REST URL"),
    network: Optional[str] = typer.Option(None, "--network", "-n", help="main / test / solo"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Log level"),
):
    """Configura node URL, rete e logging"""
    overrides = {
        key: value
        for key, value in (("node_url", node_url), ("network", network), ("log_level", log_level))
        if value is not None
    }
    try:
        config = override_settings(**{**get_settings().model_dump(), **overrides}) if overrides else get_settings()
    except ValueError as e:
        console.print(f"[red]Invalid configuration: {e}[/red]")
        raise typer.Exit(1)

    state.config = config
    setup_logging(
        log_level=config.log_level,
        log_to_file=config.log_to_file,
        log_dir=config.log_dir,
        log_format=config.log_format,
    )


@app.command("version")
def version():
    """Mostra versione"""
    console.print(f"{CLIENT_NAME} [cyan]{SOFTWARE_VERSION}[/cyan]")


# ============================================================================
# CHAIN COMMANDS
# ============================================================================

@app.command("chain-tag")
def chain_tag():
    """Chain tag del nodo (ultimo byte del genesis id)"""
    try:
        tag = state.contracts().get_chain_tag()
        console.print(f"Chain tag: [cyan]0x{tag:02x}[/cyan] ({tag})")
    except ThorClientException as e:
        _fail(e)


@app.command("best-block")
def best_block():
    """Best block e block ref corrente"""
    try:
        block = state.contracts().get_block("best")
        if block is None:
            console.print("[yellow]Best block not available.[/yellow]")
            raise typer.Exit(1)

        table = Table(title="Best Block", show_header=False)
        table.add_column("Field", style="cyan")
        table.add_column("Value")
        table.add_row("Number", str(block.number))
        table.add_row("ID", block.id)
        table.add_row("Block ref", block.id[:18])
        table.add_row("Timestamp", str(block.timestamp))
        table.add_row("Gas used", f"{block.gas_used:,} / {block.gas_limit:,}")
        table.add_row("Transactions", str(len(block.transactions)))
        console.print(table)
    except ThorClientException as e:
        _fail(e)


# ============================================================================
# TX COMMANDS
# ============================================================================

tx_app = typer.Typer(help="Transaction lookup")
app.add_typer(tx_app, name="tx")


@tx_app.command("get")
def tx_get(
    tx_id: str = typer.Argument(..., help="Transaction id (0x…)"),
    raw: bool = typer.Option(False, "--raw", help="Return the signed encoding"),
):
    """Dettaglio transazione"""
    try:
        detail = state.transactions().get_transaction(tx_id, raw=raw)
        if detail is None:
            console.print("[yellow]Transaction not found.[/yellow]")
            raise typer.Exit(1)

        if raw:
            console.print(detail.raw or "")
            return

        table = Table(title=f"Transaction {detail.id[:18]}…", show_header=False)
        table.add_column("Field", style="cyan")
        table.add_column("Value")
        table.add_row("Origin", detail.origin or "-")
        table.add_row("Clauses", str(len(detail.clauses)))
        table.add_row("Gas", str(detail.gas))
        table.add_row("Status", "pending" if detail.is_pending else f"block {detail.meta.block_number}")
        console.print(table)
    except ThorClientException as e:
        _fail(e)


@tx_app.command("receipt")
def tx_receipt(tx_id: str = typer.Argument(..., help="Transaction id (0x…)")):
    """Receipt transazione (lookup singolo)"""
    try:
        receipt = state.transactions().get_receipt(tx_id)
        if receipt is None:
            console.print("[yellow]Receipt not available yet (transaction not included).[/yellow]")
            raise typer.Exit(2)

        status = "[red]reverted[/red]" if receipt.reverted else "[green]success[/green]"
        console.print(Panel.fit(
            f"Status: {status}\n"
            f"Block: [cyan]{receipt.meta.block_number}[/cyan]\n"
            f"Gas used: [cyan]{receipt.gas_used:,}[/cyan]\n"
            f"Gas payer: [cyan]{receipt.gas_payer}[/cyan]\n"
            f"Paid: [cyan]{Amount(VTHO, receipt.paid).to_decimal_string()} VTHO[/cyan]",
            title="Receipt",
            border_style="red" if receipt.reverted else "green"
        ))
    except ThorClientException as e:
        _fail(e)


# ============================================================================
# TRANSFER COMMANDS
# ============================================================================

transfer_app = typer.Typer(help="VET / VTHO transfers")
app.add_typer(transfer_app, name="transfer")


def _print_result(title: str, tx_id: str) -> None:
    console.print(Panel.fit(
        f"[green]✅ Transaction submitted[/green]\n\nID: [cyan]{tx_id}[/cyan]",
        title=title,
        border_style="green"
    ))


@transfer_app.command("vet")
def transfer_vet(
    to: str = typer.Argument(..., help="Recipient address"),
    amount: str = typer.Argument(..., help="Amount in VET (e.g. 21.12)"),
    gas: int = typer.Option(21000, "--gas", help="Gas limit"),
    private_key: Optional[str] = PRIVATE_KEY_OPTION,
):
    """Trasferimento VET"""
    try:
        value = Amount.from_decimal(VET, amount)
        receiver = Address.from_hex(to)
        with _load_key(private_key) as key_pair:
            result = state.contracts().transfer_vet([receiver], [value], gas, None, None, key_pair)
        _print_result(f"Transfer {value}", result.id)
    except ThorClientException as e:
        _fail(e)


@transfer_app.command("vtho")
def transfer_vtho(
    to: str = typer.Argument(..., help="Recipient address"),
    amount: str = typer.Argument(..., help="Amount in VTHO (e.g. 11.12)"),
    gas: int = typer.Option(80000, "--gas", help="Gas limit"),
    private_key: Optional[str] = PRIVATE_KEY_OPTION,
):
    """Trasferimento VTHO (contratto energy)"""
    try:
        value = Amount.from_decimal(VTHO, amount)
        receiver = Address.from_hex(to)
        with _load_key(private_key) as key_pair:
            result = state.contracts().transfer_token(VTHO, [receiver], [value], gas, None, None, key_pair)
        _print_result(f"Transfer {value}", result.id)
    except ThorClientException as e:
        _fail(e)


# ============================================================================
# MPP COMMANDS
# ============================================================================

mpp_app = typer.Typer(help="Multi-party payment (Prototype contract)")
app.add_typer(mpp_app, name="mpp")


@mpp_app.command("add-user")
def mpp_add_user(
    receiver: str = typer.Option(..., "--receiver", "-r", help="Paying account"),
    users: List[str] = typer.Option(..., "--user", help="User address (repeatable)"),
    gas: int = typer.Option(80000, "--gas", help="Gas limit"),
    private_key: Optional[str] = PRIVATE_KEY_OPTION,
):
    """Aggiunge utenti pagati da receiver"""
    try:
        receivers = [Address.from_hex(receiver)] * len(users)
        user_addresses = [Address.from_hex(u) for u in users]
        with _load_key(private_key) as key_pair:
            result = state.prototype().add_user(receivers, user_addresses, gas, key_pair=key_pair)
        _print_result(f"addUser x{len(users)}", result.id)
    except ThorClientException as e:
        _fail(e)


@mpp_app.command("remove-user")
def mpp_remove_user(
    receiver: str = typer.Option(..., "--receiver", "-r", help="Paying account"),
    users: List[str] = typer.Option(..., "--user", help="User address (repeatable)"),
    gas: int = typer.Option(80000, "--gas", help="Gas limit"),
    private_key: Optional[str] = PRIVATE_KEY_OPTION,
):
    """Rimuove utenti da receiver"""
    try:
        receivers = [Address.from_hex(receiver)] * len(users)
        user_addresses = [Address.from_hex(u) for u in users]
        with _load_key(private_key) as key_pair:
            result = state.prototype().remove_users(receivers, user_addresses, gas, key_pair=key_pair)
        _print_result(f"removeUser x{len(users)}", result.id)
    except ThorClientException as e:
        _fail(e)


@mpp_app.command("master")
def mpp_master(receiver: str = typer.Argument(..., help="Account address")):
    """Master corrente di un account"""
    try:
        service = state.prototype()
        result = service.get_master_address(Address.from_hex(receiver))
        if result.reverted:
            console.print(f"[red]Call reverted: {result.vm_error}[/red]")
            raise typer.Exit(1)
        (master,) = service.decode("master", result)
        console.print(f"Master: [cyan]{master}[/cyan]")
    except ThorClientException as e:
        _fail(e)


@mpp_app.command("is-user")
def mpp_is_user(
    receiver: str = typer.Argument(..., help="Paying account"),
    user: str = typer.Argument(..., help="User address"),
):
    """Verifica se user è utente di receiver"""
    try:
        service = state.prototype()
        result = service.is_user(Address.from_hex(receiver), Address.from_hex(user))
        if result.reverted:
            console.print(f"[red]Call reverted: {result.vm_error}[/red]")
            raise typer.Exit(1)
        (flag,) = service.decode("isUser", result)
        console.print("[green]yes[/green]" if flag else "[yellow]no[/yellow]")
    except ThorClientException as e:
        _fail(e)


# ============================================================================
# KEY COMMANDS
# ============================================================================

key_app = typer.Typer(help="Key utilities")
app.add_typer(key_app, name="key")


@key_app.command("address")
def key_address(private_key: Optional[str] = PRIVATE_KEY_OPTION):
    """Address derivato dalla chiave privata"""
    try:
        with _load_key(private_key) as key_pair:
            console.print(f"Address: [cyan]{key_pair.address.to_checksum()}[/cyan]")
    except ThorClientException as e:
        _fail(e)


# ============================================================================
# ENTRY POINT
# ============================================================================

if __name__ == "__main__":
    app()
