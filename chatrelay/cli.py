"""Command line entry points: run the relay or chat through it."""

import argparse
import asyncio
import sys
from typing import List, Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.patch_stdout import patch_stdout
from rich.console import Console
from rich.markup import escape
from websockets.exceptions import ConnectionClosed, WebSocketException

from chatrelay.client import ChatClient
from chatrelay.config import LOG_LEVELS, Settings
from chatrelay.utils.exceptions import ConfigurationError, NotConnectedError

QUIT_COMMAND = "/quit"

console = Console()


def parse_args(argv: Optional[List[str]] = None, settings: Optional[Settings] = None):
    """Parse command line arguments."""
    settings = settings or Settings.from_env()

    parser = argparse.ArgumentParser(
        prog="chatrelay", description="Broadcast chat relay over WebSockets"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the relay server")
    serve.add_argument("--host", default=settings.host, help="Bind address")
    serve.add_argument("--port", type=int, default=settings.port, help="Listen port")
    serve.add_argument(
        "--log-level",
        default=settings.log_level,
        choices=LOG_LEVELS,
        type=str.upper,
        help="Log level",
    )
    serve.add_argument("--log-file", default=settings.log_file, help="Log file path")

    chat = subparsers.add_parser("chat", help="Join the chat interactively")
    chat.add_argument("--url", default=settings.client_url, help="WebSocket URL")

    return parser.parse_args(argv)


async def run_chat(url: str, session: Optional[PromptSession] = None) -> int:
    """Interactive chat: print relayed messages while reading input."""
    session = session or PromptSession()
    client = ChatClient(url)

    try:
        await client.connect()
    except (OSError, WebSocketException) as e:
        console.print(
            f"[bold red]Could not connect to[/bold red] {escape(url)}: {escape(str(e))}"
        )
        return 1

    console.print(f"[bold blue]Connected to[/bold blue] {escape(url)}")
    console.print(f"Type a message and press enter, {QUIT_COMMAND} to exit.")

    def on_message(message: str) -> None:
        console.print(f"[bold green]>[/bold green] {escape(message)}")

    listener = asyncio.create_task(client.listen(on_message))
    try:
        while client.connected:
            with patch_stdout():
                line = await session.prompt_async("> ")
            if line.strip() == QUIT_COMMAND:
                break
            # The listener may have seen the close while we were prompting
            if not client.connected:
                break
            await client.send(line)
    except (EOFError, KeyboardInterrupt):
        pass
    except (NotConnectedError, ConnectionClosed):
        pass
    finally:
        listener.cancel()
        try:
            await listener
        except asyncio.CancelledError:
            pass
        except Exception as e:
            console.print(f"[bold red]Listener error:[/bold red] {escape(str(e))}")
        await client.disconnect()

    console.print("[bold red]Disconnected[/bold red]")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    try:
        settings = Settings.from_env()
    except ConfigurationError as e:
        console.print(f"[bold red]Configuration error:[/bold red] {e.message}")
        return 2

    args = parse_args(argv, settings)

    if args.command == "serve":
        from chatrelay.main import start

        start(
            settings.model_copy(
                update={
                    "host": args.host,
                    "port": args.port,
                    "log_level": args.log_level,
                    "log_file": args.log_file,
                }
            )
        )
    elif args.command == "chat":
        return asyncio.run(run_chat(args.url))

    return 0


if __name__ == "__main__":
    sys.exit(main())
