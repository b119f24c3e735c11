from __future__ import annotations

import httpx
from rich.console import Console
from rich.markup import escape

console = Console()


def print_json(data) -> None:
    if isinstance(data, httpx.Response):
        # 2xx body that was not JSON
        console.print(data.text, markup=False, highlight=False)
        return
    console.print_json(data=data)


def info(msg: str) -> None:
    console.print(f"[bold cyan]•[/] {escape(msg)}")


def ok(msg: str) -> None:
    console.print(f"[bold green]OK[/] {escape(msg)}")


def warn(msg: str) -> None:
    console.print(f"[bold yellow]WARN[/] {escape(msg)}")


def err(msg: str) -> None:
    console.print(f"[bold red]ERR[/] {escape(msg)}")


def print(*args, **kwargs):
    """Proxy to underlying rich Console.print()."""
    console.print(*args, **kwargs)
