"""
Revealer - Typewriter-style progressive disclosure of a string.

Knows nothing about contracts: it takes text and yields growing prefixes,
one extended grapheme cluster at a time so emoji sequences, flags and
combining marks are never split.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import AsyncIterator, Optional

import regex

from .config import DEFAULT_TICK_MS

_GRAPHEME = regex.compile(r"\X")


@dataclass(frozen=True)
class RevealState:
    text: str
    in_progress: bool


def split_units(message: str) -> list[str]:
    """Split *message* into user-perceived characters."""
    return _GRAPHEME.findall(message)


async def _pause(seconds: float, cancelled: asyncio.Event) -> bool:
    """Wait *seconds* unless cancelled first. Returns True if cancelled."""
    if cancelled.is_set():
        return True
    try:
        await asyncio.wait_for(cancelled.wait(), timeout=seconds)
    except asyncio.TimeoutError:
        return False
    return True


async def reveal(
    message: str,
    tick_interval_ms: int = DEFAULT_TICK_MS,
    cancelled: Optional[asyncio.Event] = None,
) -> AsyncIterator[RevealState]:
    """
    Yield one in-progress state per unit, then a final settled state.

    Successive states are at least *tick_interval_ms* apart. Setting
    *cancelled* ends the stream without emitting anything further.
    """
    cancelled = cancelled if cancelled is not None else asyncio.Event()
    interval = max(tick_interval_ms, 0) / 1000
    shown = ""

    for index, unit in enumerate(split_units(message)):
        if index and await _pause(interval, cancelled):
            return
        if cancelled.is_set():
            return
        shown += unit
        yield RevealState(shown, True)

    if shown and await _pause(interval, cancelled):
        return
    if cancelled.is_set():
        return
    yield RevealState(shown, False)


class Revealer:
    """
    Owns at most one running reveal; starting another cancels the previous.
    """

    def __init__(self, tick_interval_ms: int = DEFAULT_TICK_MS):
        self.tick_interval_ms = tick_interval_ms
        self._cancelled: Optional[asyncio.Event] = None

    def reveal(
        self, message: str, tick_interval_ms: Optional[int] = None
    ) -> AsyncIterator[RevealState]:
        self.cancel()
        self._cancelled = asyncio.Event()
        interval = self.tick_interval_ms if tick_interval_ms is None else tick_interval_ms
        return reveal(message, interval, self._cancelled)

    def cancel(self) -> None:
        if self._cancelled is not None:
            self._cancelled.set()
            self._cancelled = None
