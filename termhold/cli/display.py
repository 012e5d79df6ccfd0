"""Display utilities for the startup screen."""

from rich.align import Align
from rich.console import Console
from rich.table import Table

from termhold import __version__

console = Console()

LOGO = r"""
▀█▀ █▀▀ █▀█ █▀▄▀█ █ █ █▀█ █   █▀▄
 █  ██▄ █▀▄ █ ▀ █ █▀█ █▄█ █▄▄ █▄▀
"""


def _apply_gradient(lines: list[str], colors: list[str]) -> list[str]:
    """Apply color gradient to text lines."""
    return [
        f"[{colors[min(i, len(colors) - 1)]}]{line}[/{colors[min(i, len(colors) - 1)]}]"
        for i, line in enumerate(lines)
    ]


def build_details_table(url: str, shell: str, cwd: str | None = None) -> Table:
    """Key/value table shown under the logo."""
    table = Table.grid(padding=(0, 2))
    table.add_column(justify="right", style="dim")
    table.add_column(justify="left")
    table.add_row("terminal", f"[bold cyan]{url}[/bold cyan]")
    table.add_row("sessions", f"{url.replace('ws://', 'http://', 1).rsplit('/api/', 1)[0]}/api/terminal/sessions")
    table.add_row("shell", shell)
    if cwd:
        table.add_row("cwd", cwd)
    return table


def display_startup_screen(url: str, shell: str, cwd: str | None = None) -> None:
    """Display the startup screen.

    Args:
        url: WebSocket URL clients connect to.
        shell: Shell argv[0] new sessions run.
        cwd: Working directory for new sessions.
    """
    logo_colored = _apply_gradient(
        LOGO.strip("\n").split("\n"),
        ["bold bright_cyan", "cyan"],
    )

    console.print()
    console.print(Align.center("\n".join(logo_colored)))
    console.print(Align.center(f"[dim]v{__version__}[/dim]"))
    console.print()
    console.print(Align.center(build_details_table(url, shell, cwd)))
    console.print()
    console.print(Align.center("[dim]Ctrl+C to stop[/dim]"))
    console.print()
