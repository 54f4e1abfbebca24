"""
Functions for formatting and displaying data in the console using Rich.
"""

from pathlib import Path
from typing import Sequence

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from gmplayer.models.catalog import SearchEntry


def format_error_with_suggestions(
    error: Exception, context: dict | None = None, config_path: Path | None = None
) -> Panel:
    """
    Formats an error with actionable suggestions into a Rich Panel.

    `config_path` is the settings file in use, named in the suggestions.
    """
    error_type = type(error).__name__
    error_msg = str(error)
    settings_file = config_path or "~/.gmplayerrc"

    suggestions_map = {
        "ConfigurationError": [
            f"• Open {settings_file} and fill in your email and password.",
            "• The file must contain a JSON object.",
        ],
        "AuthenticationError": [
            f"• Verify the credentials in {settings_file}.",
            "• Check that api_url points at your catalog service.",
        ],
        "SearchError": [
            "• Try a shorter or differently spelled query.",
            "• Check your internet connection.",
        ],
        "SelectionError": [
            "• Pick one of the numbers shown in brackets.",
        ],
        "DownloadError": [
            "• Check your internet connection and free disk space.",
            "• Run the command again; finished tracks are reused.",
        ],
        "PlayerSpawnError": [
            f"• Install mplayer, or set 'player' in {settings_file}.",
        ],
    }

    suggestions = suggestions_map.get(
        error_type, ["• Run the command with -vv for detailed logs."]
    )

    error_text = Text()
    error_text.append(f"{error_type}: ", style="bold red")
    error_text.append(error_msg)

    content = Table.grid(padding=(1, 0))
    content.add_row(error_text)
    content.add_row()
    content.add_row(Text("Suggestions", style="bold yellow"))
    content.add_row(Text("\n".join(suggestions)))

    if context:
        content.add_row()
        content.add_row(Text(f"Context: {context}", style="dim"))

    return Panel(
        content,
        title="[bold red]An Error Occurred[/bold red]",
        border_style="red",
        expand=False,
    )


def print_search_results(console: Console, entries: Sequence[SearchEntry]) -> None:
    """Prints `[index] title - artist` for each entry."""
    for index, entry in enumerate(entries):
        line = Text()
        line.append("[", style="yellow")
        line.append(str(index))
        line.append("] ", style="yellow")
        line.append(entry.title, style="white")
        line.append(" - ")
        line.append(entry.artist, style="grey50")
        console.print(line)
