"""
Rich console utilities for dual-mode CLI output.

Provides terminal output for humans and structured JSON for AI agents.
All output functions adapt to the global output_mode setting.

This module provides:
- OutputMode: Class to manage output format (text/json/quiet)
- spinner(): Context manager shown while waiting on the provider
- Output functions: success(), error(), warning(), info()
- Display functions: print_banner(), print_check_result()

Human Mode (--format text):
    - Rich spinner, colored panel and table
Agent Mode (--format json):
    - Structured JSON output to stdout, no ANSI codes
Quiet Mode (--quiet):
    - Tab-separated values, no decorations

Examples:
    >>> output_mode.format = "json"
    >>> success("Config loaded")  # Buffers to JSON
    >>> output_mode.flush_json()   # Outputs JSON to stdout
"""

from __future__ import annotations

import json
import sys
from contextlib import contextmanager
from typing import Any

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table


VALID_FORMATS = ("text", "json")


class OutputMode:
    """
    Where and how the CLI reports results.

    In "json" mode nothing is printed as it happens: messages and result
    fields accumulate in one dict that flush_json() writes to stdout as a
    single document, so agents can parse stdout without filtering.

    Examples:
        >>> mode = OutputMode("json")
        >>> mode.add_json("mentioned", True)
        >>> mode.flush_json()
        {
          "mentioned": true
        }
    """

    def __init__(self, format_type: str = "text", quiet: bool = False):
        if format_type not in VALID_FORMATS:
            raise ValueError(f"Invalid format: {format_type}. Must be 'text' or 'json'")

        self.format = format_type
        self.quiet = quiet
        self._json_buffer: dict[str, Any] = {}

    def is_human(self) -> bool:
        return self.format == "text"

    def is_agent(self) -> bool:
        return self.format == "json"

    def add_json(self, key: str, value: Any) -> None:
        self._json_buffer[key] = value

    def flush_json(self) -> None:
        """Write the buffered document to stdout (agent mode only) and reset it."""
        if not self.is_agent() or not self._json_buffer:
            return
        json.dump(self._json_buffer, sys.stdout, indent=2, ensure_ascii=False)
        sys.stdout.write("\n")
        sys.stdout.flush()
        self._json_buffer.clear()


# Set from --format / --quiet by each CLI command
output_mode = OutputMode()

# Human-mode consoles (stdout, stderr)
console = Console()
console_err = Console(stderr=True)


def _chatty() -> bool:
    return output_mode.is_human() and not output_mode.quiet


@contextmanager
def spinner(message: str):
    """Show a Rich spinner while waiting on the provider (human mode only)."""
    if not _chatty():
        yield None
        return
    with console.status(f"[bold blue]{message}", spinner="dots") as status:
        yield status


def success(message: str) -> None:
    """Green check in human mode; status/message keys in agent mode."""
    if output_mode.is_agent():
        output_mode.add_json("status", "success")
        output_mode.add_json("message", message)
    elif _chatty():
        console.print(f"[green]✓[/green] {escape(message)}")


def error(message: str) -> None:
    """
    Report a failure.

    Human mode prints to stderr, also with --quiet. Agent mode buffers
    status/error keys.
    """
    if output_mode.is_agent():
        output_mode.add_json("status", "error")
        output_mode.add_json("error", message)
    else:
        console_err.print(f"[red]✗[/red] {escape(message)}", style="red")


def warning(message: str) -> None:
    if output_mode.is_agent():
        output_mode.add_json("warning", message)
    elif _chatty():
        console.print(f"[yellow]⚠[/yellow] {escape(message)}", style="yellow")


def info(message: str) -> None:
    """Blue info line; silent in agent and quiet modes."""
    if _chatty():
        console.print(f"[blue]ℹ[/blue] {escape(message)}")


def print_banner(version: str) -> None:
    """Print the startup banner (human mode only)."""
    if not _chatty():
        return

    banner = f"""
[bold cyan]╔{"═" * 39}╗
║   LLM Brand Checker v{version:<16} ║
║   Find your brand in LLM answers      ║
╚{"═" * 39}╝[/bold cyan]
"""

    console.print(banner)


def _format_positions(positions: list[int]) -> str:
    return ", ".join(str(p) for p in positions) if positions else "-"


def print_check_result(result: dict[str, Any], show_text: bool = True) -> None:
    """
    Print the outcome of a brand check.

    Human mode: Rich panel with the verdict plus the matched answer text
    Agent mode: Buffer the result fields, then flush JSON
    Quiet mode: Tab-separated "brand, mentioned, position, positions"

    Expected dict keys (as produced by CheckResult.to_dict() or the match
    command): brand, mentioned, positions, position; optional prompt,
    raw_text, used_model, error.

    Args:
        result: Result dictionary
        show_text: Include the answer text in human mode
    """
    if output_mode.is_agent():
        for key, value in result.items():
            output_mode.add_json(key, value)
        output_mode.flush_json()
        return

    positions = result.get("positions") or []
    position = result.get("position")

    if output_mode.quiet:
        print(
            f"{result.get('brand', '')}\t"
            f"{'yes' if result.get('mentioned') else 'no'}\t"
            f"{position if position is not None else '-'}\t"
            f"{','.join(str(p) for p in positions)}"
        )
        return

    table = Table(box=box.ROUNDED, show_header=False)
    table.add_column("Field", style="bold cyan", no_wrap=True)
    table.add_column("Value")

    table.add_row("Brand", escape(str(result.get("brand", ""))))
    if result.get("prompt"):
        table.add_row("Prompt", escape(str(result["prompt"])))
    if result.get("used_model"):
        table.add_row("Model", escape(str(result["used_model"])))
    table.add_row(
        "Mentioned",
        "[green]✓ yes[/green]" if result.get("mentioned") else "[red]✗ no[/red]",
    )
    table.add_row("Position", str(position) if position is not None else "-")
    table.add_row("Positions", _format_positions(positions))
    if result.get("error"):
        table.add_row("Error", f"[red]{escape(str(result['error']))}[/red]")

    if result.get("error"):
        border_style = "red"
        title = "[bold red]✗ Provider Call Failed[/bold red]"
    elif result.get("mentioned"):
        border_style = "green"
        title = "[bold green]✓ Brand Mentioned[/bold green]"
    else:
        border_style = "yellow"
        title = "[bold yellow]⚠ Brand Not Mentioned[/bold yellow]"

    console.print(Panel(table, title=title, border_style=border_style, box=box.ROUNDED))

    if show_text and result.get("raw_text"):
        console.print(
            Panel(
                escape(str(result["raw_text"])),
                title="Answer",
                border_style="dim",
                box=box.ROUNDED,
            )
        )
