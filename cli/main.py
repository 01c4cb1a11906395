"""CLI entry point and argument parsing"""

import sys
import argparse
from rich.console import Console

import settings
from cli import token_commands
from config.interceptor import InterceptorConfig
from utils.storage import CredentialStore


console = Console()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="copilot-interceptor",
        description="OpenAI-compatible proxy for the GitHub Copilot API",
    )
    subparsers = parser.add_subparsers(dest="command")

    serve = subparsers.add_parser("serve", help="Run the proxy server")
    serve.add_argument("--debug", "-d", action="store_true", help="Enable debug logging")
    serve.add_argument("--bind", "-b", default=None, help="Override bind address (default: from config)")
    serve.add_argument("--port", "-p", type=int, default=None, help="Override port (default: from config)")

    tokens = subparsers.add_parser("tokens", help="Manage stored credentials")
    token_actions = tokens.add_subparsers(dest="action")
    token_actions.add_parser("list", help="List stored credentials")
    add = token_actions.add_parser("add", help="Store a credential and select it")
    add.add_argument("name")
    add.add_argument("value")
    select = token_actions.add_parser("select", help="Select a stored credential")
    select.add_argument("index", type=int)
    token_actions.add_parser("clear", help="Clear the selection")
    delete = token_actions.add_parser("delete", help="Delete a stored credential")
    delete.add_argument("index", type=int)

    return parser


def run_tokens(args, store: CredentialStore) -> int:
    action = args.action or "list"
    if action == "list":
        token_commands.show_tokens(store, console)
        return 0
    if action == "add":
        ok = token_commands.add_token(store, console, args.name, args.value)
    elif action == "select":
        ok = token_commands.select_token(store, console, args.index)
    elif action == "clear":
        ok = token_commands.clear_selection(store, console)
    else:
        ok = token_commands.delete_token(store, console, args.index)
    return 0 if ok else 1


def run_serve(args) -> int:
    from proxy import ProxyServer

    config = InterceptorConfig.from_settings()
    server = ProxyServer(debug=args.debug, bind_address=args.bind, port=args.port)

    console.print("[bold]Copilot Interceptor[/bold]\n")
    console.print(f"  Mode: [cyan]{config.mode.value}[/cyan]"
                  f"{' (thinking)' if config.thinking_enabled else ''}")
    console.print(f"  VS Code headers: {'on' if config.use_vscode_headers else 'off'}")
    console.print(f"  Base URL: http://{server.bind_address}:{server.port}/v1")
    console.print("  Endpoint: /v1/chat/completions")
    console.print("\n[dim]Press Ctrl+C to stop[/dim]\n")

    server.run()
    return 0


def main(argv=None):
    """Entry point for the CLI"""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        if args.command == "tokens":
            sys.exit(run_tokens(args, CredentialStore(settings.CREDENTIALS_FILE)))
        if args.command == "serve":
            sys.exit(run_serve(args))
        parser.print_help()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        console.print("Goodbye!")


if __name__ == "__main__":
    main()
