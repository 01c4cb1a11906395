"""Stored credential management commands"""

from rich.table import Table

from credentials import mask_token
from utils.storage import CredentialStore

MASK_VISIBLE_CHARS = 8


def show_tokens(store: CredentialStore, console):
    """
    Display stored credentials, marking the selected one

    Args:
        store: CredentialStore instance
        console: Rich console for output
    """
    tokens = store.list_tokens()
    selected = store.get_selected_token()

    if not tokens:
        console.print("[yellow]No stored credentials.[/yellow]")
        console.print("Add one with: copilot-interceptor tokens add NAME VALUE")
        return

    table = Table(title="Stored Credentials")
    table.add_column("#", style="cyan", justify="right")
    table.add_column("Name")
    table.add_column("Value")
    table.add_column("Selected", justify="center")

    for index, entry in enumerate(tokens):
        table.add_row(
            str(index),
            entry.get("name", ""),
            mask_token(entry["value"], MASK_VISIBLE_CHARS),
            "[green]✓[/green]" if entry["value"] == selected else "",
        )

    console.print(table)
    console.print(f"[dim]File: {store.credentials_file}[/dim]")


def add_token(store: CredentialStore, console, name: str, value: str) -> bool:
    try:
        entry = store.add_token(name, value)
    except ValueError as e:
        console.print(f"[red]ERROR:[/red] {e}")
        return False
    console.print(f"[green]✓ Stored and selected '{entry['name']}'[/green]")
    return True


def select_token(store: CredentialStore, console, index: int) -> bool:
    try:
        store.select_token(index)
    except IndexError:
        console.print(f"[red]ERROR:[/red] No stored credential at index {index}")
        return False
    console.print(f"[green]✓ Selected credential #{index}[/green]")
    return True


def clear_selection(store: CredentialStore, console) -> bool:
    store.select_token(None)
    console.print("[green]✓ Selection cleared[/green] (request fields and fallback sources apply)")
    return True


def delete_token(store: CredentialStore, console, index: int) -> bool:
    try:
        removed = store.delete_token(index)
    except IndexError:
        console.print(f"[red]ERROR:[/red] No stored credential at index {index}")
        return False
    console.print(f"[green]✓ Deleted '{removed['name']}'[/green]")
    return True
