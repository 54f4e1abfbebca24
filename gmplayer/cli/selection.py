"""
Interactive, bounds-checked selection from a list of search results.
"""

import asyncio
from typing import Sequence, TypeVar

import typer
from rich.console import Console

from gmplayer.exceptions import SelectionError
from gmplayer.models.catalog import SearchEntry

from .formatters import print_search_results

T = TypeVar("T")


def select_entry(entries: Sequence[T], index: int) -> T:
    """Returns `entries[index]`, rejecting anything outside the listed range."""
    if not entries:
        raise SelectionError("There is nothing to choose from.")
    if index < 0 or index >= len(entries):
        raise SelectionError(
            f"#{index} is not in the list, choose a number between 0 and "
            f"{len(entries) - 1}."
        )
    return entries[index]


async def prompt_for_entry(
    console: Console, entries: Sequence[SearchEntry], question: str
) -> SearchEntry:
    """Lists the entries and blocks until the operator types an index."""
    console.print()
    print_search_results(console, entries)
    answer = await asyncio.to_thread(typer.prompt, question, type=int)
    return select_entry(entries, answer)
