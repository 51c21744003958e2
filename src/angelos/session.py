"""
Reading session - "submit an address, get a message" with latest-wins ordering.

Each ``submit`` takes a new generation id, cancels whatever reveal is still
running, and resolves off the event loop. When the resolution completes, the
outcome is delivered only if no newer submission has started in the
meantime; stale outcomes are dropped and ``submit`` returns None.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import AsyncIterator, Callable, Optional, Union

import httpx

from .config import Settings
from .resolver import ResolvedMessage, Resolver, ResolverError, Stage, StageObserver
from .revealer import Revealer, RevealState

logger = logging.getLogger(__name__)

ResolverFactory = Callable[[StageObserver], Resolver]


@dataclass(frozen=True)
class MessageResolved:
    generation: int
    message: ResolvedMessage
    reveal: AsyncIterator[RevealState]


@dataclass(frozen=True)
class ResolutionFailed:
    generation: int
    error: ResolverError


Outcome = Union[MessageResolved, ResolutionFailed]


class ReadingSession:
    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.BaseTransport] = None,
        resolver_factory: Optional[ResolverFactory] = None,
        revealer: Optional[Revealer] = None,
    ):
        self.settings = settings
        self._resolver_factory = resolver_factory or (
            lambda observer: Resolver(settings, transport=transport, on_stage=observer)
        )
        self.revealer = revealer or Revealer(settings.tick_ms)
        self.stage: Optional[Stage] = None
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    def is_current(self, generation: int) -> bool:
        return generation == self._generation

    def _observer(self, generation: int) -> StageObserver:
        def observe(stage: Stage) -> None:
            if self.is_current(generation):
                self.stage = stage

        return observe

    async def _track(
        self, generation: int, stream: AsyncIterator[RevealState]
    ) -> AsyncIterator[RevealState]:
        async for state in stream:
            yield state
            if not state.in_progress and self.is_current(generation):
                self.stage = Stage.DONE

    async def submit(self, address: str) -> Optional[Outcome]:
        """
        Resolve *address* and return the outcome, or None if superseded.

        Resolver failures come back as ``ResolutionFailed``, not exceptions.
        """
        self._generation += 1
        generation = self._generation
        self.revealer.cancel()

        # A fresh resolver per request: resolver stage is per-call state
        resolver = self._resolver_factory(self._observer(generation))
        try:
            message = await asyncio.to_thread(resolver.resolve, address)
        except ResolverError as exc:
            if not self.is_current(generation):
                logger.debug("dropping stale failure for generation %d", generation)
                return None
            return ResolutionFailed(generation, exc)

        if not self.is_current(generation):
            logger.debug("dropping stale result for generation %d", generation)
            return None

        self.stage = Stage.REVEALING
        stream = self.revealer.reveal(message.text)
        return MessageResolved(generation, message, self._track(generation, stream))

    def close(self) -> None:
        """Cancel the running reveal and invalidate in-flight requests."""
        self._generation += 1
        self.revealer.cancel()
        self.stage = None
